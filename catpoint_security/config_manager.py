"""Configuration management with file persistence and change callbacks."""

import json
import os
from dataclasses import asdict, fields
from typing import Optional, Callable, List

from .config.defaults import DEFAULT_CONFIG, DEFAULT_PATHS, IMAGE_SERVICES
from .exceptions import ConfigurationError
from .logging_config import get_logger
from .models.config import SystemConfig

logger = get_logger("config_manager")


class ConfigManager:
    """Manages system configuration stored as a JSON file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_PATHS["config_file"]
        self._config: Optional[SystemConfig] = None
        self._config_change_callbacks: List[Callable[[SystemConfig], None]] = []

        self.load_config()

    def load_config(self) -> SystemConfig:
        """Load configuration from file or create default."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    config_dict = json.load(f)
                self._config = SystemConfig(**self._known_keys(config_dict))
            except (json.JSONDecodeError, TypeError, AttributeError) as e:
                logger.error(f"Error loading config: {e}. Using defaults.")
                self._config = SystemConfig()
        else:
            self._config = SystemConfig()
            self.save_config()

        return self._config

    @staticmethod
    def _known_keys(config_dict: dict) -> dict:
        known = {f.name for f in fields(SystemConfig)}
        unknown = set(config_dict) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return {k: v for k, v in config_dict.items() if k in known}

    def save_config(self) -> None:
        """Save current configuration to file."""
        if self._config is None:
            return

        config_dir = os.path.dirname(self.config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_path, 'w') as f:
            json.dump(asdict(self._config), f, indent=2)

    def get_config(self) -> SystemConfig:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def update_config(self, **kwargs) -> None:
        """Update configuration with new values; unknown keys are ignored."""
        if self._config is None:
            self.load_config()

        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        self.save_config()

        for callback in self._config_change_callbacks:
            callback(self._config)

    def validate_config(self) -> bool:
        """Validate current configuration."""
        try:
            self.check_config()
        except ConfigurationError as e:
            logger.warning(f"Invalid configuration: {e}")
            return False
        return True

    def check_config(self) -> None:
        """Raise ConfigurationError describing the first invalid setting."""
        config = self._config
        if config is None:
            raise ConfigurationError("No configuration loaded")

        self._check_types(config)

        if not config.database_path:
            raise ConfigurationError("database_path must not be empty")

        if config.image_service not in IMAGE_SERVICES:
            raise ConfigurationError(f"image_service must be one of {IMAGE_SERVICES}")

        if config.scale_factor <= 1.0:
            raise ConfigurationError("scale_factor must be greater than 1.0")

        if config.min_neighbors < 0:
            raise ConfigurationError("min_neighbors must not be negative")

        if config.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ConfigurationError(f"Unknown log_level {config.log_level}")

        if (config.notification_cooldown_seconds < 0 or
                config.notification_retry_attempts < 0 or
                config.notification_max_queue_size < 1):
            raise ConfigurationError("Notification limits out of range")

    @staticmethod
    def _check_types(config: SystemConfig) -> None:
        for name, default in DEFAULT_CONFIG.items():
            value = getattr(config, name)
            expected = (int, float) if isinstance(default, float) else type(default)
            if isinstance(value, bool) != isinstance(default, bool) or not isinstance(value, expected):
                raise ConfigurationError(
                    f"{name} must be {type(default).__name__}, got {type(value).__name__}"
                )

    def register_change_callback(self, callback: Callable[[SystemConfig], None]) -> None:
        """Register a callback to be called when config changes."""
        if callback not in self._config_change_callbacks:
            self._config_change_callbacks.append(callback)

    def unregister_change_callback(self, callback: Callable[[SystemConfig], None]) -> None:
        """Unregister a config change callback."""
        if callback in self._config_change_callbacks:
            self._config_change_callbacks.remove(callback)
