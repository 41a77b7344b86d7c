"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    DEFAULT_ERROR_KEY,
    DEFAULT_ERROR_TEXT,
    DEFAULT_LOCAL_FACTS,
    FallbackConfig,
    PollerConfig,
    RemoteServiceConfig,
)

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_ERROR_KEY",
    "DEFAULT_ERROR_TEXT",
    "DEFAULT_LOCAL_FACTS",
    "FallbackConfig",
    "PollerConfig",
    "RemoteServiceConfig",
]
