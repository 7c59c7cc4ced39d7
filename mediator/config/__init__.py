"""Configuration module for the mediator."""

from .logging import LoggingSettings
from .settings import (
    ConfigurationError,
    DispatchSettings,
    MediatorSettings,
    get_settings,
)


__all__ = [
    "ConfigurationError",
    "DispatchSettings",
    "LoggingSettings",
    "MediatorSettings",
    "get_settings",
]
