"""Validator contract and helpers for composing validators."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeAlias

ValidationOutcome: TypeAlias = object
"""``True`` accepts a proposal; any other value rejects it and is kept as the payload."""

Validator: TypeAlias = Callable[[str, Any, Any], ValidationOutcome]
"""Called as ``validator(key, new_value, old_value)``."""


def is_accepted(outcome: ValidationOutcome) -> bool:
    # only the boolean itself accepts; truthy payloads such as "ok" are rejections
    return outcome is True


def validator_map(validators: Mapping[str, Validator | Sequence[Validator]]) -> Validator:
    """Combine per-field validators into a single buffer validator.

    Fields without an entry accept every value. When a field has several
    validators all of them run: a single rejection is reported as its own payload,
    several are reported as a list in declaration order.
    """

    table: dict[str, tuple[Validator, ...]] = {
        key: (entry,) if callable(entry) else tuple(entry) for key, entry in validators.items()
    }

    def validate(key: str, new_value: Any, old_value: Any) -> ValidationOutcome:
        rejections = [
            outcome
            for outcome in (check(key, new_value, old_value) for check in table.get(key, ()))
            if not is_accepted(outcome)
        ]
        if not rejections:
            return True
        if len(rejections) == 1:
            return rejections[0]
        return rejections

    return validate
