"""
Logging configuration for BorderWatch.

Everything goes to stdout and to a rotating borderwatch.log under LOG_DIR;
errors are also copied to error.log so operators can tail one short file.
"""

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path
from typing import Optional, Union

from borderwatch.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# (file name, minimum level) for each rotating log file
LOG_FILES = (
    ("borderwatch.log", logging.DEBUG),
    ("error.log", logging.ERROR),
)

# Chatty libraries kept at WARNING regardless of LOG_LEVEL
QUIET_LOGGERS = ("aiohttp", "sqlalchemy.engine", "multipart", "uvicorn.access")


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_dir: Optional[Union[str, Path]] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger and return the application logger.

    Safe to call again, e.g. to move the log files; earlier handlers are
    closed and replaced.

    Args:
        log_dir: Directory for the log files. Defaults to LOG_DIR.
        level: Root level name. Defaults to LOG_LEVEL.
    """
    log_path = Path(log_dir or settings.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)
    root.addHandler(console)

    for filename, file_level in LOG_FILES:
        root.addHandler(_rotating_handler(log_path / filename, file_level, formatter))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("borderwatch")


logger = setup_logging()
