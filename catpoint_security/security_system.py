"""Application wiring that builds the security service from configuration."""

from typing import Optional, Dict, Any

from .config_manager import ConfigManager
from .exceptions import ConfigurationError
from .logging_config import get_logger, setup_logging
from .models.security import Sensor, SensorType, ArmingStatus
from .services.error_handler import global_error_handler
from .services.image_service import FakeImageService, OpenCVImageService
from .services.interfaces import ImageServiceInterface, SecurityRepositoryInterface
from .services.notification_service import (
    LoggingStatusListener, PushNotificationListener, NotificationConfig
)
from .services.security_repository import SqliteSecurityRepository
from .services.security_service import SecurityService
from .utils import load_image

logger = get_logger("security_system")


class SecuritySystem:
    """Builds and owns the repository, image service, security service and listeners."""

    def __init__(self, config_manager: Optional[ConfigManager] = None,
                 repository: Optional[SecurityRepositoryInterface] = None,
                 image_service: Optional[ImageServiceInterface] = None):
        self.config_manager = config_manager or ConfigManager()
        self.config_manager.check_config()
        self.config = self.config_manager.get_config()

        setup_logging(self.config.log_level, self.config.log_dir or None)

        self.repository = repository or SqliteSecurityRepository(self.config.database_path)
        self.image_service = image_service or self._create_image_service()
        self.security_service = SecurityService(self.repository, self.image_service)

        self.logging_listener = LoggingStatusListener()
        self.security_service.add_status_listener(self.logging_listener)

        self.push_listener: Optional[PushNotificationListener] = None
        if self.config.push_notifications_enabled:
            self.push_listener = PushNotificationListener(NotificationConfig(
                push_enabled=True,
                webhook_url=self.config.push_webhook_url,
                retry_attempts=self.config.notification_retry_attempts,
                cooldown_seconds=self.config.notification_cooldown_seconds,
                max_queue_size=self.config.notification_max_queue_size
            ))
            self.security_service.add_status_listener(self.push_listener)

        logger.info("Security system initialized")

    def _create_image_service(self) -> ImageServiceInterface:
        if self.config.image_service == "fake":
            return FakeImageService()
        if self.config.image_service == "opencv":
            return OpenCVImageService(
                cascade_path=self.config.cascade_path or None,
                scale_factor=self.config.scale_factor,
                min_neighbors=self.config.min_neighbors
            )
        raise ConfigurationError(f"Unknown image service: {self.config.image_service}")

    def scan_image(self, image_path: str) -> bool:
        """Load an image file and run it through the security service."""
        image = load_image(image_path)
        logger.info(f"Scanning {image_path}")
        return self.security_service.process_image(image)

    def add_sensor(self, name: str, sensor_type: SensorType) -> Sensor:
        """Create and register a new sensor."""
        sensor = Sensor(name, sensor_type)
        self.security_service.add_sensor(sensor)
        return sensor

    def get_status(self) -> Dict[str, Any]:
        """Get a summary of the current system state."""
        sensors = sorted(self.security_service.get_sensors())
        return {
            "arming_status": self.security_service.get_arming_status().name,
            "alarm_status": self.security_service.get_alarm_status().name,
            "cat_detected": self.security_service.cat_detected,
            "sensors": [
                {"name": s.name, "type": s.sensor_type.name, "active": s.active}
                for s in sensors
            ],
            "notifications": self.push_listener.get_notification_stats() if self.push_listener else None,
            "errors": global_error_handler.get_error_stats()
        }

    def arm(self, arming_status: ArmingStatus) -> None:
        self.security_service.set_arming_status(arming_status)

    def shutdown(self) -> None:
        """Stop background work and flush pending notifications."""
        if self.push_listener:
            self.push_listener.stop_processing()
            self.push_listener.process_queue()
            self.security_service.remove_status_listener(self.push_listener)
        self.security_service.remove_status_listener(self.logging_listener)
        logger.info("Security system stopped")
