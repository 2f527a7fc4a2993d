"""Unit tests for logging configuration."""

import unittest
import logging
import tempfile
import shutil
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security import logging_config
from catpoint_security.logging_config import get_logger, setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Test cases for LoggingManager."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        setup_logging("INFO")
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_component_logger_name(self):
        self.assertEqual(get_logger("security_service").name, "catpoint.security_service")

    def test_file_logging(self):
        manager = setup_logging("DEBUG", self.test_dir)
        logger = get_logger("test_component")

        logger.debug("debug line")
        logger.error("error line")
        manager.log_with_context(logger, logging.WARNING, "with context", {"sensor": "door", "battery": "5%"})
        for handler in manager.handlers:
            handler.flush()

        with open(os.path.join(self.test_dir, "security.log")) as f:
            main_log = f.read()
        with open(os.path.join(self.test_dir, "errors.log")) as f:
            error_log = f.read()

        self.assertIn("debug line", main_log)
        self.assertIn("sensor=door", main_log)
        self.assertIn("battery=5%", main_log)
        self.assertIn(f"pid={os.getpid()}", main_log)
        self.assertIn("error line", error_log)
        self.assertNotIn("debug line", error_log)
        self.assertIs(logging_config.logging_manager, manager)

    def test_set_log_level(self):
        manager = setup_logging("INFO")
        manager.set_log_level(logging.WARNING)

        self.assertEqual(logging.getLogger("catpoint").level, logging.WARNING)
        self.assertEqual(manager.get_log_stats()["log_level"], "WARNING")


if __name__ == '__main__':
    unittest.main()
