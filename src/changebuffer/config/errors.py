"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a changebuffer setting read from the environment has an invalid value."""
