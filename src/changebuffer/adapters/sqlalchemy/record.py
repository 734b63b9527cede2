"""Expose SQLAlchemy-mapped instances as persistable buffer records."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import Any, TypeAlias

from sqlalchemy import inspect

from changebuffer.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

log = getLogger(__name__)

UnitOfWorkFactory: TypeAlias = Callable[[], SqlAlchemyUnitOfWork]


class UnknownFieldError(KeyError):
    """Raised when writing an attribute that is not mapped on the entity."""


class SqlAlchemyRecord:
    """Field access and persistence for one mapped entity.

    ``save`` adds the entity to a fresh unit of work and commits it. Database
    errors are rolled back by the unit of work and re-raised unchanged. A rollback
    expires an already stored entity, so its fields are reloaded from the database
    before the error propagates; the entity stays readable and can be saved again.
    """

    def __init__(
        self,
        entity: object,
        *,
        unit_of_work_factory: UnitOfWorkFactory = SqlAlchemyUnitOfWork,
    ) -> None:
        self.entity = entity
        self._unit_of_work_factory = unit_of_work_factory
        self._mapped_keys = frozenset(inspect(type(entity)).attrs.keys())

    def get_field(self, key: str) -> Any:
        return getattr(self.entity, key, None)

    def set_field(self, key: str, value: Any) -> None:
        if key not in self._mapped_keys:
            raise UnknownFieldError(key)
        setattr(self.entity, key, value)

    def save(self) -> object:
        try:
            with self._unit_of_work_factory() as uow:
                uow.session.add(self.entity)
                uow.commit()
        except Exception:
            self._reload_expired()
            raise
        log.debug("Committed %r", self.entity)
        return self.entity

    def _reload_expired(self) -> None:
        state = inspect(self.entity)
        # transient entities keep their values on rollback
        if state.key is None or not state.expired_attributes:
            return
        with self._unit_of_work_factory() as uow:
            uow.session.add(self.entity)
            uow.session.refresh(self.entity)
        log.debug("Reloaded %r after a failed commit", self.entity)

    def __repr__(self) -> str:
        return f"SqlAlchemyRecord({self.entity!r})"
