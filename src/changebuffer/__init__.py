from __future__ import annotations

from importlib import metadata

from changebuffer.domain import (
    Change,
    ChangeBuffer,
    FieldError,
    Validator,
    validator_map,
)

try:
    __version__ = metadata.version("changebuffer")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"

__all__ = [
    "Change",
    "ChangeBuffer",
    "FieldError",
    "Validator",
    "__version__",
    "validator_map",
]
