"""Exception types raised by the security system and its collaborators."""


class SecuritySystemError(Exception):
    """Base class for security system errors."""


class RepositoryError(SecuritySystemError):
    """The security repository could not read or write its state."""


class ImageServiceError(SecuritySystemError):
    """An image could not be analyzed or the analyzer is unavailable."""


class ConfigurationError(SecuritySystemError):
    """The configuration is invalid."""
