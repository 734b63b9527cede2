"""Ports the domain depends on."""

from __future__ import annotations

from .record import FieldAccess, Persistable

__all__ = ["FieldAccess", "Persistable"]
