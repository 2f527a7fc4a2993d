"""Data models for the catpoint security system."""

from .security import ArmingStatus, AlarmStatus, SensorType, Sensor
from .config import SystemConfig

__all__ = ['ArmingStatus', 'AlarmStatus', 'SensorType', 'Sensor', 'SystemConfig']
