"""Configuration data models."""

from dataclasses import dataclass


@dataclass
class SystemConfig:
    """System configuration settings."""
    # Storage settings
    database_path: str = "data/security.db"

    # Image analysis settings
    image_service: str = "opencv"  # opencv, fake
    cascade_path: str = ""  # Empty means use the cascades bundled with OpenCV
    scale_factor: float = 1.1
    min_neighbors: int = 3

    # Logging settings
    log_level: str = "INFO"
    log_dir: str = ""  # Empty means console only

    # Notification settings
    push_notifications_enabled: bool = True
    push_webhook_url: str = ""  # Empty means mock mode
    notification_cooldown_seconds: int = 60
    notification_retry_attempts: int = 3
    notification_max_queue_size: int = 100
