"""
Tests for the logging setup.
"""

import logging
import tempfile
import unittest
from logging.handlers import RotatingFileHandler
from pathlib import Path

from borderwatch.core.logging import QUIET_LOGGERS, setup_logging


class TestSetupLogging(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.log_dir = Path(self.tmp.name) / "logs"

    def tearDown(self):
        # Move handlers back before the directory goes away
        setup_logging()
        self.tmp.cleanup()

    def file_handlers(self):
        return {Path(h.baseFilename).name: h for h in logging.getLogger().handlers
                if isinstance(h, RotatingFileHandler)}

    def test_creates_log_files_in_directory(self):
        log = setup_logging(self.log_dir, "debug")

        self.assertEqual(log.name, "borderwatch")
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        handlers = self.file_handlers()
        self.assertEqual(set(handlers), {"borderwatch.log", "error.log"})
        self.assertEqual(handlers["error.log"].level, logging.ERROR)
        for handler in handlers.values():
            self.assertEqual(Path(handler.baseFilename).parent, self.log_dir)

    def test_errors_reach_both_files(self):
        log = setup_logging(self.log_dir, "info")
        log.info("zone list refreshed")
        log.error("feed parse failed")
        for handler in logging.getLogger().handlers:
            handler.flush()

        main_log = (self.log_dir / "borderwatch.log").read_text(encoding="utf-8")
        error_log = (self.log_dir / "error.log").read_text(encoding="utf-8")
        self.assertIn("zone list refreshed", main_log)
        self.assertIn("feed parse failed", main_log)
        self.assertIn("[ERROR] borderwatch: feed parse failed", error_log)
        self.assertNotIn("zone list refreshed", error_log)

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(self.log_dir)
        setup_logging(self.log_dir)

        self.assertEqual(len(logging.getLogger().handlers), 3)
        self.assertEqual(len(self.file_handlers()), 2)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(self.log_dir, "chatty")
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_noisy_libraries_quieted(self):
        setup_logging(self.log_dir, "debug")
        for name in QUIET_LOGGERS:
            self.assertEqual(logging.getLogger(name).level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
