"""Service interfaces and abstract base classes."""

from abc import ABC, abstractmethod
from typing import Set

import numpy as np

from ..models.security import ArmingStatus, AlarmStatus, Sensor


class SecurityRepositoryInterface(ABC):
    """Interface for storage of the security system state."""

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        """Get the current arming status."""
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Store the arming status."""
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        """Get the current alarm status."""
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Store the alarm status."""
        pass

    @abstractmethod
    def get_sensors(self) -> Set[Sensor]:
        """Get all known sensors."""
        pass

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        """Add a sensor."""
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        """Remove a sensor."""
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Store the current state of a known sensor."""
        pass


class ImageServiceInterface(ABC):
    """Interface for image analysis."""

    @abstractmethod
    def image_contains_cat(self, image: np.ndarray, confidence_threshold: float) -> bool:
        """Check whether the image shows a cat.

        Args:
            image: Image as a numpy array (BGR or grayscale)
            confidence_threshold: Minimum confidence in percent (0-100)
        """
        pass


class StatusListener(ABC):
    """Observer of security system events."""

    @abstractmethod
    def notify(self, alarm_status: AlarmStatus) -> None:
        """Called whenever the alarm status is set."""
        pass

    @abstractmethod
    def cat_detected(self, cat_detected: bool) -> None:
        """Called with the result of every processed image."""
        pass

    def sensor_status_changed(self) -> None:
        """Called after sensors are added, removed or change activation."""
        pass
