"""Fake records and validators shared by buffer tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Person:
    first_name: str
    last_name: str


@dataclass
class SavingPerson(Person):
    """Person with an async ``save`` that snapshots its fields."""

    fail_with: Exception | None = None
    saved: list[tuple[str, str]] = field(default_factory=list)

    async def save(self) -> str:
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        self.saved.append((self.first_name, self.last_name))
        return "saved"


@dataclass
class SyncSavingPerson(Person):
    save_calls: int = 0

    def save(self) -> int:
        self.save_calls += 1
        return self.save_calls


class GatedRecord:
    """Record whose ``save`` blocks until the test releases it."""

    def __init__(self, **fields: Any) -> None:
        self.fields: dict[str, Any] = dict(fields)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    def get_field(self, key: str) -> Any:
        return self.fields.get(key)

    def set_field(self, key: str, value: Any) -> None:
        self.fields[key] = value

    async def save(self) -> dict[str, Any]:
        self.started.set()
        await self.release.wait()
        return dict(self.fields)


def last_name_min_length(key: str, new_value: Any, old_value: Any) -> object:
    _ = old_value
    if key == "last_name" and len(new_value) < 3:
        return "Last name must be at least 3 characters"
    return True


@dataclass
class CallLog:
    """Validator that accepts everything except ``reject`` and records its calls."""

    reject: object = None
    calls: list[tuple[str, Any, Any]] = field(default_factory=list)

    def __call__(self, key: str, new_value: Any, old_value: Any) -> object:
        self.calls.append((key, new_value, old_value))
        if new_value == self.reject:
            return f"{key} rejected"
        return True
