"""Configuration module."""
from .settings import Settings, ConfigurationError, get_settings, settings
from .logging_config import configure_logging

__all__ = [
    "Settings",
    "ConfigurationError",
    "get_settings",
    "settings",
    "configure_logging",
]
