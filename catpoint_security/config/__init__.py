"""Configuration components for the catpoint security system."""

from .defaults import (
    DEFAULT_CONFIG,
    SECURITY_CONSTANTS,
    DEFAULT_PATHS,
    CASCADE_SETTINGS,
    IMAGE_SERVICES
)

__all__ = [
    'DEFAULT_CONFIG',
    'SECURITY_CONSTANTS',
    'DEFAULT_PATHS',
    'CASCADE_SETTINGS',
    'IMAGE_SERVICES'
]
