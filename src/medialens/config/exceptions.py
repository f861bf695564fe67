"""Custom exceptions for medialens configuration."""


class ConfigError(Exception):
    """Raised when configuration data cannot be loaded or validated."""
