"""Read-only views over a change buffer's pending state."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

TValue = TypeVar("TValue")


@dataclass(frozen=True, slots=True)
class Change:
    """A validated value waiting to be applied to the record."""

    key: str
    value: Any


@dataclass(frozen=True, slots=True)
class FieldError:
    """A rejected proposal together with the validator's payload."""

    key: str
    value: Any
    validation: Any


class FieldMap(Mapping[str, TValue], Generic[TValue]):
    """Immutable key lookup that also answers attribute access.

    ``view.first_name`` returns ``None`` for absent keys so callers can test a
    single field directly; ``view["first_name"]`` raises ``KeyError`` as usual.
    Keys named like ``Mapping`` members (``get``, ``keys``, ``values``, ``items``)
    resolve to those methods on attribute access; use item access for them.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, TValue]) -> None:
        object.__setattr__(self, "_items", dict(items))

    def __getitem__(self, key: str) -> TValue:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getattr__(self, name: str) -> TValue | None:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._items.get(name)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"
