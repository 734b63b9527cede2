"""SQLAlchemy adapter package for changebuffer."""

from __future__ import annotations

from .record import SqlAlchemyRecord, UnitOfWorkFactory, UnknownFieldError
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyRecord",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "UnitOfWorkFactory",
    "UnknownFieldError",
    "configured_engine",
    "is_started",
    "shutdown",
    "startup",
]
