"""Security service: the alarm decision logic of the system."""

import threading
from typing import Optional, Set

import numpy as np

from ..config.defaults import SECURITY_CONSTANTS
from ..logging_config import get_logger
from ..models.security import ArmingStatus, AlarmStatus, Sensor
from .image_service import FakeImageService
from .interfaces import SecurityRepositoryInterface, ImageServiceInterface, StatusListener

logger = get_logger("security_service")


class SecurityService:
    """Receives changes to the security system and decides the alarm status.

    Every change is forwarded to the repository. Alarm status changes go through
    ``set_alarm_status`` so registered listeners always hear about them.
    Collaborator errors are not handled here and reach the caller unchanged.
    """

    def __init__(self, security_repository: SecurityRepositoryInterface,
                 image_service: Optional[ImageServiceInterface] = None):
        self.security_repository = security_repository
        self.image_service = image_service or FakeImageService()
        self.sensitivity_threshold = SECURITY_CONSTANTS["CAT_SENSITIVITY_THRESHOLD"]

        self._status_listeners: Set[StatusListener] = set()
        self._listener_lock = threading.RLock()
        self._cat_detected = False

    @property
    def cat_detected(self) -> bool:
        """Result of the most recently processed image."""
        return self._cat_detected

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Set the arming status, updating the alarm status and sensors as needed."""
        if arming_status == ArmingStatus.DISARMED:
            self.set_alarm_status(AlarmStatus.NO_ALARM)

        if arming_status == ArmingStatus.ARMED_HOME and self._cat_detected:
            self.set_alarm_status(AlarmStatus.ALARM)

        if arming_status.is_armed:
            self._deactivate_all_sensors()

        self.security_repository.set_arming_status(arming_status)
        logger.info(f"Arming status set to {arming_status.name}")

    def _deactivate_all_sensors(self) -> None:
        # Snapshot first: the repository may hand back its live set.
        sensors = list(self.security_repository.get_sensors())
        for sensor in sensors:
            sensor.active = False
            self.security_repository.update_sensor(sensor)

        logger.debug(f"Reset {len(sensors)} sensors to inactive")
        self._notify_sensor_status_changed()

    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> None:
        """Change the activation status of a sensor and update the alarm status."""
        was_active = sensor.active

        if was_active and active and self.get_alarm_status() == AlarmStatus.PENDING_ALARM:
            self._handle_sensor_activated()
        elif not was_active and active:
            self._handle_sensor_activated()
        elif was_active and not active:
            self._handle_sensor_deactivated()

        sensor.active = active
        self.security_repository.update_sensor(sensor)
        logger.debug(f"Sensor {sensor.name} active={active}")
        self._notify_sensor_status_changed()

    def _handle_sensor_activated(self) -> None:
        if self.security_repository.get_arming_status() == ArmingStatus.DISARMED:
            return

        alarm_status = self.security_repository.get_alarm_status()
        if alarm_status == AlarmStatus.NO_ALARM:
            self.set_alarm_status(AlarmStatus.PENDING_ALARM)
        elif alarm_status == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.ALARM)

    def _handle_sensor_deactivated(self) -> None:
        # An active alarm is never cleared by a sensor going quiet.
        if self.security_repository.get_alarm_status() == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.NO_ALARM)

    def process_image(self, current_camera_image: np.ndarray) -> bool:
        """Analyze a camera image for cats and update the alarm status.

        Returns whether a cat was detected.
        """
        cat = bool(self.image_service.image_contains_cat(current_camera_image, self.sensitivity_threshold))
        self._handle_cat_detected(cat)
        return cat

    def _handle_cat_detected(self, cat: bool) -> None:
        self._cat_detected = cat
        logger.info(f"Camera scan complete, cat detected: {cat}")

        if cat and self.get_arming_status() == ArmingStatus.ARMED_HOME:
            self.set_alarm_status(AlarmStatus.ALARM)
        else:
            self.set_alarm_status(AlarmStatus.NO_ALARM)

        for listener in self._listener_snapshot():
            listener.cat_detected(cat)

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Change the alarm status of the system and notify all listeners."""
        self.security_repository.set_alarm_status(alarm_status)
        logger.info(f"Alarm status set to {alarm_status.name}")

        for listener in self._listener_snapshot():
            listener.notify(alarm_status)

    def add_status_listener(self, status_listener: StatusListener) -> None:
        with self._listener_lock:
            self._status_listeners.add(status_listener)

    def remove_status_listener(self, status_listener: StatusListener) -> None:
        with self._listener_lock:
            self._status_listeners.discard(status_listener)

    def _listener_snapshot(self):
        with self._listener_lock:
            return list(self._status_listeners)

    def _notify_sensor_status_changed(self) -> None:
        for listener in self._listener_snapshot():
            listener.sensor_status_changed()

    def get_alarm_status(self) -> AlarmStatus:
        return self.security_repository.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        return self.security_repository.get_arming_status()

    def get_sensors(self) -> Set[Sensor]:
        return self.security_repository.get_sensors()

    def add_sensor(self, sensor: Sensor) -> None:
        self.security_repository.add_sensor(sensor)
        self._notify_sensor_status_changed()

    def remove_sensor(self, sensor: Sensor) -> None:
        self.security_repository.remove_sensor(sensor)
        self._notify_sensor_status_changed()
