"""
Test configuration for BorderWatch.

Points the application at an in-memory database and temporary directories,
and switches off the external feed and the language model, before any
application module reads its settings.
"""

import os
import sys
import tempfile

_tmp = tempfile.mkdtemp(prefix="borderwatch-tests-")

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_DIR"] = os.path.join(_tmp, "logs")
os.environ["UPLOAD_DIR"] = os.path.join(_tmp, "uploads")
os.environ["EXTERNAL_FEED_ENABLED"] = "false"
os.environ["AI_ENABLED"] = "false"
os.environ.pop("ADMIN_API_KEY", None)

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
