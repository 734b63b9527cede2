"""Behavioural settings for change buffers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

SAVE_CLEAR_POLICY_ENV: Final[str] = "CHANGEBUFFER_SAVE_CLEAR_POLICY"


class SaveClearPolicy(StrEnum):
    """Which pending changes a successful save discards."""

    # every pending change, including ones proposed while the save was in flight
    ALL = "all"
    # only changes captured when the save started and not re-proposed since
    SAVED = "saved"


@dataclass(frozen=True, slots=True)
class BufferConfig:
    save_clear_policy: SaveClearPolicy = SaveClearPolicy.ALL


def get_buffer_config() -> BufferConfig:
    """Load buffer settings from the environment."""

    raw_policy = optional_env_var(SAVE_CLEAR_POLICY_ENV)
    if raw_policy is None:
        return BufferConfig()
    try:
        policy = SaveClearPolicy(raw_policy.lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in SaveClearPolicy)
        raise ConfigurationError(
            f"Invalid {SAVE_CLEAR_POLICY_ENV}={raw_policy!r}; expected one of: {allowed}"
        ) from exc
    return BufferConfig(save_clear_policy=policy)
