"""
Catpoint Security System

A home security controller that combines arming mode, door/window/motion
sensors and camera-based cat detection into an alarm status.
"""

__version__ = "1.0.0"
__author__ = "Catpoint Security"

from .models import (
    ArmingStatus,
    AlarmStatus,
    SensorType,
    Sensor,
    SystemConfig
)
from .services import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListener
)
from .services.security_service import SecurityService
from .exceptions import (
    SecuritySystemError,
    RepositoryError,
    ImageServiceError,
    ConfigurationError
)

__all__ = [
    # Core service
    'SecurityService',

    # Data models
    'ArmingStatus',
    'AlarmStatus',
    'SensorType',
    'Sensor',
    'SystemConfig',

    # Service interfaces
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListener',

    # Errors
    'SecuritySystemError',
    'RepositoryError',
    'ImageServiceError',
    'ConfigurationError'
]
