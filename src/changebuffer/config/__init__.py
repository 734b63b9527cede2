"""Application configuration helpers."""

from __future__ import annotations

from .buffer import BufferConfig, SaveClearPolicy, get_buffer_config
from .env import optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "BufferConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "SaveClearPolicy",
    "configure_logging",
    "get_buffer_config",
    "get_database_config",
    "optional_env_var",
]
