"""Configuration module for the eventsync backend.

Provides centralized configuration management with type-safe enums.

Usage:
    from eventsync.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.LOCAL:
        ...
"""

from eventsync.core.config.enums import Environment, LogFormat
from eventsync.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "LogFormat",
    "settings",
]

# Singleton settings instance
settings = Settings()
