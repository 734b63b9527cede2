"""Staged field changes held in front of a record until they are committed.

A ``ChangeBuffer`` wraps one record and an optional validator. Every proposed
value is validated once, then kept either as a pending change or as an error;
never both for the same key. Pending changes reach the record only through
``execute`` (or ``persist``), and ``rollback`` forgets everything.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final, Self

from changebuffer.config.buffer import BufferConfig, SaveClearPolicy, get_buffer_config
from changebuffer.domain.records import as_record, persistence_of
from changebuffer.domain.validation import is_accepted
from changebuffer.domain.views import Change, FieldError, FieldMap

if TYPE_CHECKING:
    from collections.abc import Mapping

    from changebuffer.domain.ports.record import FieldAccess
    from changebuffer.domain.validation import ValidationOutcome, Validator

log = getLogger(__name__)

_UNSET: Final = object()


@dataclass(frozen=True, slots=True)
class BufferSnapshot:
    """Point-in-time copy of a buffer's pending changes and errors."""

    changes: Mapping[str, Any]
    errors: Mapping[str, FieldError]


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class ChangeBuffer:
    """Validation-gated staging area for changes to a single record.

    Public attributes that are not part of the buffer's own API are proxied:
    ``buffer.last_name`` reads through :meth:`get` and ``buffer.last_name = "Bob"``
    proposes through :meth:`set`. Record fields whose names collide with the API
    (``changes``, ``save``, ...) must use :meth:`get`/:meth:`set` directly.
    """

    def __init__(
        self,
        content: object,
        validator: Validator | None = None,
        *,
        config: BufferConfig | None = None,
    ) -> None:
        self._content = content
        self._record: FieldAccess = as_record(content)
        self._validator = validator
        self._config = config or get_buffer_config()
        self._changes: dict[str, Any] = {}
        self._errors: dict[str, FieldError] = {}

    # field access

    def get(self, key: str) -> Any:
        """Return the pending value for ``key``, falling back to the record's live value."""

        if key in self._changes:
            return self._changes[key]
        return self._record.get_field(key)

    def set(self, key: str, value: Any) -> Any:
        """Propose ``value`` for ``key``.

        The validator is called exactly once with ``(key, value, current)``, where
        ``current`` is what :meth:`get` returns. An accepted value becomes the
        pending change and clears any earlier error; a rejected one is recorded in
        :attr:`errors` and drops any earlier pending change. Rejections are never
        raised. The proposed value is returned either way.
        """

        old_value = self.get(key)
        outcome: ValidationOutcome = (
            True if self._validator is None else self._validator(key, value, old_value)
        )
        self._store(key, value, outcome)
        return value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        if hasattr(type(self), name):
            raise AttributeError(
                f"{name!r} is part of the ChangeBuffer API; use set({name!r}, value)"
            )
        self.set(name, value)

    def _store(self, key: str, value: Any, outcome: ValidationOutcome) -> None:
        if is_accepted(outcome):
            self._changes[key] = value
            self._errors.pop(key, None)
            log.debug("Accepted change for %r", key)
            return
        self._errors[key] = FieldError(key=key, value=value, validation=outcome)
        self._changes.pop(key, None)
        log.debug("Rejected change for %r: %r", key, outcome)

    # read views

    @property
    def content(self) -> object:
        return self._content

    @property
    def validator(self) -> Validator | None:
        return self._validator

    @property
    def changes(self) -> list[Change]:
        """Pending changes in the order their keys were first accepted."""
        return [Change(key=key, value=value) for key, value in self._changes.items()]

    @property
    def errors(self) -> list[FieldError]:
        """Rejected proposals in the order their keys were first rejected."""
        return list(self._errors.values())

    @property
    def change(self) -> FieldMap[Any]:
        return FieldMap(self._changes)

    @property
    def error(self) -> FieldMap[FieldError]:
        return FieldMap(self._errors)

    @property
    def is_valid(self) -> bool:
        return not self._errors

    @property
    def is_invalid(self) -> bool:
        return not self.is_valid

    @property
    def is_dirty(self) -> bool:
        return bool(self._changes)

    @property
    def is_pristine(self) -> bool:
        return not self.is_dirty

    # explicit validation

    def validate(self, *keys: str) -> bool:
        """Run the validator again and return :attr:`is_valid`.

        Without arguments every pending and errored key is checked. The candidate
        is the pending value (or the rejected value for errored keys, or the
        record's value for untouched keys) and the old value is the record's live
        value. Outcomes gate storage exactly like :meth:`set`, except that an
        untouched key that passes stays untouched.
        """

        if self._validator is None:
            return self.is_valid
        targets = keys or (*self._changes, *self._errors)
        for key in targets:
            old_value = self._record.get_field(key)
            if key in self._changes:
                candidate = self._changes[key]
            elif key in self._errors:
                candidate = self._errors[key].value
            else:
                candidate = old_value
            outcome = self._validator(key, candidate, old_value)
            if is_accepted(outcome) and key not in self._errors and key not in self._changes:
                continue
            self._store(key, candidate, outcome)
        return self.is_valid

    def add_error(self, key: str, validation: Any, *, value: Any = _UNSET) -> Any:
        """Record an error produced outside the validator, e.g. by a remote service.

        ``value`` defaults to the current value of ``key``. Any pending change for
        the key is discarded.
        """

        if is_accepted(validation):
            raise ValueError("an error payload cannot be True")
        candidate = self.get(key) if value is _UNSET else value
        self._errors[key] = FieldError(key=key, value=candidate, validation=validation)
        self._changes.pop(key, None)
        return validation

    # commit / persist / rollback

    def execute(self) -> Self:
        """Write every pending change onto the record. Pending state is kept."""

        for key, value in self._changes.items():
            self._record.set_field(key, value)
        if self._changes:
            log.debug("Applied %d pending change(s) to %r", len(self._changes), self._content)
        return self

    async def save(self) -> Any:
        """Persist the record through its own ``save`` and return that result.

        Records without a save operation are treated as already persisted. On
        success pending changes are discarded according to the configured
        :class:`SaveClearPolicy` while errors are kept. On failure nothing is
        cleared and the record's exception propagates.

        A synchronous ``save`` (such as ``SqlAlchemyRecord.save``) runs directly on
        the calling thread and blocks the event loop until it returns; records that
        do slow I/O should return an awaitable instead.
        """

        persistence = persistence_of(self._record, self._content)
        if persistence is None:
            log.debug("%r has no save operation; nothing to persist", self._content)
            return None

        saved = dict(self._changes)
        try:
            result = await _resolve(persistence.save())
        except Exception:
            log.warning(
                "Saving %r failed; keeping %d pending change(s)",
                self._content,
                len(self._changes),
            )
            raise
        self._clear_saved(saved)
        log.info("Saved %r", self._content)
        return result

    async def persist(self) -> Any:
        """Apply pending changes to the record, then save it."""

        self.execute()
        return await self.save()

    def _clear_saved(self, saved: Mapping[str, Any]) -> None:
        if self._config.save_clear_policy is SaveClearPolicy.ALL:
            self._changes.clear()
            return
        for key, value in saved.items():
            # a key proposed again during the save keeps its newer value
            if key in self._changes and self._changes[key] is value:
                del self._changes[key]

    def rollback(self) -> Self:
        """Discard all pending changes and errors. The record is not touched."""

        if self._changes or self._errors:
            log.debug(
                "Rolling back %d change(s) and %d error(s)",
                len(self._changes),
                len(self._errors),
            )
        self._changes.clear()
        self._errors.clear()
        return self

    def snapshot(self) -> BufferSnapshot:
        return BufferSnapshot(
            changes=MappingProxyType(dict(self._changes)),
            errors=MappingProxyType(dict(self._errors)),
        )

    def restore(self, snapshot: BufferSnapshot) -> Self:
        """Replace pending changes and errors with the ones captured in ``snapshot``."""

        self._changes = dict(snapshot.changes)
        self._errors = dict(snapshot.errors)
        return self

    def __repr__(self) -> str:
        return (
            f"<ChangeBuffer content={self._content!r} "
            f"changes={len(self._changes)} errors={len(self._errors)}>"
        )
