"""Unit tests for security system wiring and the command-line entry point."""

import unittest
from unittest.mock import Mock, patch
import tempfile
import shutil
import json
import sys
import os

import cv2
import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.config_manager import ConfigManager
from catpoint_security.exceptions import ConfigurationError, ImageServiceError
from catpoint_security.models.security import ArmingStatus, AlarmStatus, SensorType
from catpoint_security.security_system import SecuritySystem
from catpoint_security.services.image_service import FakeImageService, OpenCVImageService
from catpoint_security.services.interfaces import ImageServiceInterface
from catpoint_security.services.security_repository import SqliteSecurityRepository
import start_security


class TestSecuritySystem(unittest.TestCase):
    """Test cases for SecuritySystem."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, "config.json")
        self.config_manager = ConfigManager(self.config_path)
        self.config_manager.update_config(
            database_path=os.path.join(self.test_dir, "security.db"),
            image_service="fake"
        )
        self.image_path = os.path.join(self.test_dir, "frame.png")
        cv2.imwrite(self.image_path, np.zeros((48, 64, 3), dtype=np.uint8))

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def create_system(self, **kwargs) -> SecuritySystem:
        system = SecuritySystem(self.config_manager, **kwargs)
        self.addCleanup(system.shutdown)
        return system

    def test_builds_configured_services(self):
        system = self.create_system()

        self.assertIsInstance(system.repository, SqliteSecurityRepository)
        self.assertIsInstance(system.image_service, FakeImageService)
        self.assertIsNotNone(system.push_listener)

    def test_opencv_image_service(self):
        self.config_manager.update_config(image_service="opencv")
        system = self.create_system()
        self.assertIsInstance(system.image_service, OpenCVImageService)

    def test_push_listener_disabled(self):
        self.config_manager.update_config(push_notifications_enabled=False)
        system = self.create_system()
        self.assertIsNone(system.push_listener)

    def test_invalid_config_rejected(self):
        self.config_manager.update_config(image_service="aws")
        with self.assertRaises(ConfigurationError):
            SecuritySystem(self.config_manager)

    def test_scan_image_raises_alarm_when_home(self):
        image_service = Mock(spec=ImageServiceInterface)
        image_service.image_contains_cat.return_value = True
        system = self.create_system(image_service=image_service)
        system.arm(ArmingStatus.ARMED_HOME)

        self.assertTrue(system.scan_image(self.image_path))

        status = system.get_status()
        self.assertEqual(status["alarm_status"], "ALARM")
        self.assertEqual(status["arming_status"], "ARMED_HOME")
        self.assertTrue(status["cat_detected"])
        events = [event for _, event, _ in system.logging_listener.history]
        self.assertIn("cat_detected", events)

    def test_scan_missing_image(self):
        system = self.create_system()
        with self.assertRaises(ImageServiceError):
            system.scan_image(os.path.join(self.test_dir, "missing.png"))

    def test_sensor_status(self):
        system = self.create_system()
        system.add_sensor("Front door", SensorType.DOOR)
        system.add_sensor("Back window", SensorType.WINDOW)

        sensors = system.get_status()["sensors"]

        self.assertEqual([s["name"] for s in sensors], ["Back window", "Front door"])
        self.assertTrue(all(not s["active"] for s in sensors))

    def test_state_survives_restart(self):
        system = self.create_system()
        system.arm(ArmingStatus.ARMED_AWAY)
        door = system.add_sensor("Front door", SensorType.DOOR)
        system.security_service.change_sensor_activation_status(door, True)

        restarted = self.create_system()

        self.assertEqual(restarted.security_service.get_arming_status(), ArmingStatus.ARMED_AWAY)
        self.assertEqual(restarted.security_service.get_alarm_status(), AlarmStatus.PENDING_ALARM)

    def test_shutdown_detaches_listeners(self):
        system = SecuritySystem(self.config_manager)
        system.shutdown()

        self.assertFalse(system.push_listener.running)
        system.security_service.set_alarm_status(AlarmStatus.ALARM)
        self.assertEqual(system.logging_listener.history, [])


class TestStartSecurity(unittest.TestCase):
    """Test cases for the command-line entry point."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, "config.json")
        with open(self.config_path, 'w') as f:
            json.dump({
                "database_path": os.path.join(self.test_dir, "security.db"),
                "image_service": "opencv",
                "push_notifications_enabled": False
            }, f)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_arm_and_scan(self):
        image_path = os.path.join(self.test_dir, "frame.png")
        cv2.imwrite(image_path, np.zeros((48, 64, 3), dtype=np.uint8))

        with patch('builtins.print') as mock_print:
            exit_code = start_security.main(["--config", self.config_path, "--arm", "home", image_path])

        self.assertEqual(exit_code, 0)
        status = json.loads(mock_print.call_args[0][0])
        self.assertEqual(status["arming_status"], "ARMED_HOME")
        self.assertEqual(status["alarm_status"], "NO_ALARM")
        self.assertFalse(status["cat_detected"])

    def test_unreadable_image_fails(self):
        exit_code = start_security.main(["--config", self.config_path,
                                         os.path.join(self.test_dir, "missing.png")])
        self.assertEqual(exit_code, 1)

    def test_invalid_config_fails(self):
        with open(self.config_path, 'w') as f:
            json.dump({"image_service": "aws"}, f)

        self.assertEqual(start_security.main(["--config", self.config_path]), 1)

    def test_wrongly_typed_config_fails(self):
        for setting in ({"scale_factor": "fast"}, {"log_level": 10}):
            with self.subTest(setting=setting):
                with open(self.config_path, 'w') as f:
                    json.dump(setting, f)

                self.assertEqual(start_security.main(["--config", self.config_path]), 1)


if __name__ == '__main__':
    unittest.main()
