"""Centralized logging configuration for the security system."""

import logging
import logging.handlers
import os
import sys
from datetime import datetime
from typing import Optional, Dict, Any
from pathlib import Path

from .config.defaults import SECURITY_CONSTANTS

LOGGER_PREFIX = "catpoint"


class StructuredFormatter(logging.Formatter):
    """Formatter that appends record context and error locations."""

    def __init__(self, include_context: bool = True):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        base_format = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"

        if self.include_context and hasattr(record, 'process_id'):
            base_format += " | pid=%(process_id)d"

        if self.include_context and hasattr(record, 'context'):
            context_str = " | ".join([f"{k}={v}" for k, v in record.context.items()])
            base_format += " | Context: " + context_str.replace("%", "%%")

        if record.levelno >= logging.ERROR and record.exc_info:
            base_format += " | %(pathname)s:%(lineno)d"

        formatter = logging.Formatter(base_format)
        return formatter.format(record)


class ContextFilter(logging.Filter):
    """Filter that tags records with the process id."""

    def __init__(self):
        super().__init__()
        self.process_id = os.getpid()

    def filter(self, record: logging.LogRecord) -> bool:
        record.process_id = self.process_id
        return True


class LoggingManager:
    """Centralized logging management for the security system.

    Logs go to the console. When a log directory is given, a rotating main log
    and a rotating error-only log are written there as well.
    """

    def __init__(self, log_dir: Optional[str] = None, log_level: int = logging.INFO):
        self.log_dir = Path(log_dir) if log_dir else None
        self.log_level = log_level
        self.max_log_size = SECURITY_CONSTANTS["LOG_ROTATION_SIZE_MB"] * 1024 * 1024
        self.backup_count = SECURITY_CONSTANTS["LOG_BACKUP_COUNT"]

        self.main_log_file: Optional[Path] = None
        self.error_log_file: Optional[Path] = None
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.main_log_file = self.log_dir / "security.log"
            self.error_log_file = self.log_dir / "errors.log"

        self.component_loggers: Dict[str, logging.Logger] = {}
        self.handlers: list = []

        self._setup_package_logger()

    def _setup_package_logger(self) -> None:
        """Attach handlers to the package logger."""
        package_logger = logging.getLogger(LOGGER_PREFIX)
        package_logger.setLevel(self.log_level)

        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(StructuredFormatter(include_context=False))
        self.handlers.append(console_handler)
        self.console_handler = console_handler

        if self.main_log_file:
            main_file_handler = logging.handlers.RotatingFileHandler(
                self.main_log_file,
                maxBytes=self.max_log_size,
                backupCount=self.backup_count
            )
            main_file_handler.setLevel(logging.DEBUG)
            main_file_handler.setFormatter(StructuredFormatter(include_context=True))
            self.handlers.append(main_file_handler)

            error_file_handler = logging.handlers.RotatingFileHandler(
                self.error_log_file,
                maxBytes=self.max_log_size,
                backupCount=self.backup_count
            )
            error_file_handler.setLevel(logging.ERROR)
            error_file_handler.setFormatter(StructuredFormatter(include_context=True))
            self.handlers.append(error_file_handler)

        for handler in self.handlers:
            package_logger.addHandler(handler)

    def get_component_logger(self, component_name: str) -> logging.Logger:
        """Get or create a logger for a specific component."""
        if component_name in self.component_loggers:
            return self.component_loggers[component_name]

        logger = logging.getLogger(f"{LOGGER_PREFIX}.{component_name}")
        logger.addFilter(ContextFilter())

        self.component_loggers[component_name] = logger
        return logger

    def log_with_context(self, logger: logging.Logger, level: int,
                         message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log message with additional context information."""
        if context:
            logger.log(level, message, extra={"context": context})
        else:
            logger.log(level, message)

    def set_log_level(self, level: int) -> None:
        """Set the package log level."""
        self.log_level = level
        logging.getLogger(LOGGER_PREFIX).setLevel(level)
        self.console_handler.setLevel(level)

    def get_log_stats(self) -> Dict[str, Any]:
        """Get logging statistics."""
        stats = {
            "log_directory": str(self.log_dir) if self.log_dir else None,
            "log_files": {},
            "active_loggers": list(self.component_loggers.keys()),
            "log_level": logging.getLevelName(self.log_level)
        }

        for log_file in (self.main_log_file, self.error_log_file):
            if log_file and log_file.exists():
                stats["log_files"][log_file.name] = {
                    "size_mb": log_file.stat().st_size / (1024 * 1024),
                    "modified": datetime.fromtimestamp(log_file.stat().st_mtime).isoformat()
                }

        return stats

    def close(self) -> None:
        """Detach and close this manager's handlers."""
        package_logger = logging.getLogger(LOGGER_PREFIX)
        for handler in self.handlers:
            package_logger.removeHandler(handler)
            handler.close()
        self.handlers = []


# Global logging manager instance
logging_manager = LoggingManager()


def get_logger(component_name: str) -> logging.Logger:
    """Convenience function to get a component logger."""
    return logging_manager.get_component_logger(component_name)


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None) -> LoggingManager:
    """Setup centralized logging system."""
    global logging_manager

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging_manager.close()
    logging_manager = LoggingManager(log_dir, numeric_level)

    return logging_manager
