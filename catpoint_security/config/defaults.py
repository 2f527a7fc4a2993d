"""Default configuration values and constants."""

from typing import Dict, Any

# Default system configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # Storage settings
    "database_path": "data/security.db",

    # Image analysis settings
    "image_service": "opencv",
    "cascade_path": "",
    "scale_factor": 1.1,
    "min_neighbors": 3,

    # Logging settings
    "log_level": "INFO",
    "log_dir": "",

    # Notification settings
    "push_notifications_enabled": True,
    "push_webhook_url": "",
    "notification_cooldown_seconds": 60,
    "notification_retry_attempts": 3,
    "notification_max_queue_size": 100
}

# System constants
SECURITY_CONSTANTS = {
    "CAT_SENSITIVITY_THRESHOLD": 50.0,  # Percent confidence required to report a cat
    "PUSH_TIMEOUT_SECONDS": 10,
    "LOG_ROTATION_SIZE_MB": 10,
    "LOG_BACKUP_COUNT": 5
}

# File paths and directories
DEFAULT_PATHS = {
    "config_file": "config.json"
}

# Haar cascade settings for the OpenCV image service
CASCADE_SETTINGS = {
    "cascade_files": (
        "haarcascade_frontalcatface.xml",
        "haarcascade_frontalcatface_extended.xml"
    ),
    "min_size": (30, 30),
    "max_size": (300, 300),
    "blur_kernel_size": 3
}

IMAGE_SERVICES = ("opencv", "fake")
