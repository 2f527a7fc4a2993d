"""Unit tests for error handler."""

import unittest
from unittest.mock import Mock
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.services.error_handler import (
    ErrorHandler, ErrorSeverity, ComponentStatus, ErrorRecord
)


class TestErrorHandler(unittest.TestCase):
    """Test cases for ErrorHandler."""

    def setUp(self):
        """Set up test fixtures."""
        self.handler = ErrorHandler(max_records=5)
        self.handler.register_component("security_repository", max_recovery_attempts=2)

    def test_register_component(self):
        self.assertEqual(self.handler.component_error_counts["security_repository"], 0)
        self.assertEqual(self.handler.get_component_health()["security_repository"],
                         ComponentStatus.HEALTHY)

    def test_handle_error_records_and_degrades(self):
        try:
            raise IOError("disk full")
        except IOError as e:
            record = self.handler.handle_error("security_repository", e, ErrorSeverity.HIGH)

        self.assertIsInstance(record, ErrorRecord)
        self.assertIn("disk full", record.traceback_str)
        self.assertEqual(self.handler.component_error_counts["security_repository"], 1)
        self.assertEqual(self.handler.get_component_health()["security_repository"],
                         ComponentStatus.DEGRADED)
        self.assertTrue(self.handler.is_system_degraded())

    def test_critical_error_fails_component(self):
        self.handler.handle_error("image_service", RuntimeError("no cascade"), ErrorSeverity.CRITICAL)

        self.assertEqual(self.handler.get_component_health()["image_service"], ComponentStatus.FAILED)

    def test_low_severity_keeps_component_healthy(self):
        self.handler.handle_error("notification_service", RuntimeError("timeout"), ErrorSeverity.LOW)

        self.assertEqual(self.handler.get_component_health()["notification_service"],
                         ComponentStatus.HEALTHY)
        self.assertFalse(self.handler.is_system_degraded())

    def test_records_are_bounded(self):
        for i in range(8):
            self.handler.handle_error("security_repository", RuntimeError(str(i)))

        self.assertEqual(len(self.handler.error_records), 5)
        self.assertEqual(str(self.handler.error_records[-1].error), "7")
        self.assertEqual(self.handler.component_error_counts["security_repository"], 8)

    def test_recovery(self):
        callback = Mock()
        self.handler.register_recovery_callback("security_repository", callback)
        self.handler.handle_error("security_repository", RuntimeError("x"), ErrorSeverity.HIGH)

        self.assertTrue(self.handler.attempt_recovery("security_repository"))
        callback.assert_called_once()
        self.assertEqual(self.handler.get_component_health()["security_repository"],
                         ComponentStatus.HEALTHY)

        self.assertTrue(self.handler.attempt_recovery("security_repository"))
        self.assertFalse(self.handler.attempt_recovery("security_repository"))

    def test_failed_recovery(self):
        self.handler.register_recovery_callback("security_repository", Mock(side_effect=RuntimeError("still broken")))

        self.assertFalse(self.handler.attempt_recovery("security_repository"))

    def test_recovery_without_callbacks(self):
        self.assertFalse(self.handler.attempt_recovery("security_repository"))

    def test_error_summary_and_reset(self):
        self.handler.handle_error("security_repository", RuntimeError("a"), ErrorSeverity.HIGH)
        self.handler.handle_error("image_service", RuntimeError("b"), ErrorSeverity.LOW)

        summary = self.handler.get_error_summary()
        self.assertEqual(summary["total_errors"], 2)
        self.assertEqual(summary["component_counts"], {"security_repository": 1, "image_service": 1})
        self.assertEqual(summary["severity_counts"]["high"], 1)
        self.assertEqual(summary["severity_counts"]["low"], 1)

        self.handler.reset_error_counts()
        stats = self.handler.get_error_stats()
        self.assertEqual(stats["component_error_counts"]["security_repository"], 0)
        self.assertFalse(stats["system_degraded"])


if __name__ == '__main__':
    unittest.main()
