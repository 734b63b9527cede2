"""Field access adapters for plain Python records."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from changebuffer.domain.ports.record import FieldAccess, Persistable


class AttributeRecord:
    """Read and write fields of an arbitrary object through its attributes."""

    def __init__(self, obj: object) -> None:
        self.obj = obj

    def get_field(self, key: str) -> Any:
        return getattr(self.obj, key, None)

    def set_field(self, key: str, value: Any) -> None:
        setattr(self.obj, key, value)

    def __repr__(self) -> str:
        return f"AttributeRecord({self.obj!r})"


class MappingRecord:
    """Read and write fields of a mutable mapping through its items."""

    def __init__(self, mapping: MutableMapping[str, Any]) -> None:
        self.mapping = mapping

    def get_field(self, key: str) -> Any:
        return self.mapping.get(key)

    def set_field(self, key: str, value: Any) -> None:
        self.mapping[key] = value

    def __repr__(self) -> str:
        return f"MappingRecord({self.mapping!r})"


def as_record(content: object) -> FieldAccess:
    """Return a ``FieldAccess`` view of ``content``.

    Objects that already speak the protocol are used as-is, mutable mappings are
    accessed by item, and everything else by attribute.
    """

    if isinstance(content, FieldAccess):
        return content
    if isinstance(content, MutableMapping):
        return MappingRecord(content)  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(content, Mapping):
        raise TypeError("read-only mappings cannot be wrapped in a change buffer")
    return AttributeRecord(content)


def persistence_of(record: FieldAccess, content: object) -> Persistable | None:
    """Return whichever of ``record`` or ``content`` can save, preferring the adapter."""

    for candidate in (record, content):
        if isinstance(candidate, Persistable) and callable(candidate.save):
            return candidate
    return None
