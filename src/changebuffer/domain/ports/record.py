"""Capabilities a wrapped record can offer to a change buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable


@runtime_checkable
class FieldAccess(Protocol):
    """Readable and writable access to named fields."""

    def get_field(self, key: str) -> Any: ...

    def set_field(self, key: str, value: Any) -> None: ...


@runtime_checkable
class Persistable(Protocol):
    """Optional durable storage. ``save`` may return a plain result or an awaitable."""

    def save(self) -> Any | Awaitable[Any]: ...
