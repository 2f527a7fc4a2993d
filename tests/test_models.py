"""Unit tests for security data models."""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.models.security import ArmingStatus, AlarmStatus, Sensor, SensorType


class TestSecurityModels(unittest.TestCase):
    """Test cases for security enums and sensors."""

    def test_descriptions(self):
        self.assertEqual(ArmingStatus.ARMED_HOME.description, "Armed - At Home")
        self.assertEqual(AlarmStatus.ALARM.description, "Awooga!")

    def test_is_armed(self):
        self.assertFalse(ArmingStatus.DISARMED.is_armed)
        self.assertTrue(ArmingStatus.ARMED_HOME.is_armed)
        self.assertTrue(ArmingStatus.ARMED_AWAY.is_armed)

    def test_sensor_defaults(self):
        sensor = Sensor("Front door", SensorType.DOOR)
        self.assertFalse(sensor.active)
        self.assertIsNotNone(sensor.sensor_id)

    def test_sensor_identity(self):
        """Sensors with the same name are still distinct sensors."""
        first = Sensor("Window", SensorType.WINDOW)
        second = Sensor("Window", SensorType.WINDOW)
        self.assertNotEqual(first, second)
        self.assertEqual(len({first, second}), 2)

    def test_sensor_stays_in_set_when_toggled(self):
        sensor = Sensor("Hallway", SensorType.MOTION)
        sensors = {sensor}

        sensor.active = True

        self.assertIn(sensor, sensors)

    def test_sensor_ordering(self):
        door = Sensor("Garage", SensorType.DOOR)
        motion = Sensor("Garage", SensorType.MOTION)
        attic = Sensor("Attic", SensorType.WINDOW)

        self.assertEqual(sorted([motion, door, attic]), [attic, door, motion])


if __name__ == '__main__':
    unittest.main()
