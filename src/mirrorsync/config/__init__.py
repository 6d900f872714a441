"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .unification import (
    HALF_CHAPTER_EPSILON,
    DisplayDefaults,
    get_display_defaults,
)

__all__ = [
    "HALF_CHAPTER_EPSILON",
    "ConfigurationError",
    "DatabaseConfig",
    "DisplayDefaults",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_display_defaults",
    "get_storage_config",
]
