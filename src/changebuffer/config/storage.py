"""Database settings for the SQLAlchemy record adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var

DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_database_config() -> DatabaseConfig | None:
    """Return the database configured through ``DATABASE_URI``, if any.

    There is no implicit default: a library must not pick a location on disk for
    its caller.
    """

    uri = optional_env_var(DATABASE_URI_ENV)
    if uri is None:
        return None
    return DatabaseConfig(uri=uri)
