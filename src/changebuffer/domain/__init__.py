"""Change buffer domain: staging, validation gating and record access."""

from __future__ import annotations

from .buffer import BufferSnapshot, ChangeBuffer
from .ports import FieldAccess, Persistable
from .records import AttributeRecord, MappingRecord, as_record, persistence_of
from .validation import ValidationOutcome, Validator, is_accepted, validator_map
from .views import Change, FieldError, FieldMap

__all__ = [
    "AttributeRecord",
    "BufferSnapshot",
    "Change",
    "ChangeBuffer",
    "FieldAccess",
    "FieldError",
    "FieldMap",
    "MappingRecord",
    "Persistable",
    "ValidationOutcome",
    "Validator",
    "as_record",
    "is_accepted",
    "persistence_of",
    "validator_map",
]
