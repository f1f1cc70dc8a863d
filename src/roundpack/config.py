"""Configuration defaults, env vars, and runtime options for roundpack."""

from __future__ import annotations

import os
from dataclasses import dataclass

from roundpack.errors import InvalidConfiguration
from roundpack.packer import FillPolicy


VERSION = "1.0.0"

DEFAULT_ROUND_COUNT = 4
DEFAULT_CAPACITY_MINUTES = 25
DEFAULT_STARTABLE_RATIO = 0.75

# Quick battle: a single round that may start once 20 of 25 minutes are planned.
QUICK_ROUND_COUNT = 1
QUICK_STARTABLE_RATIO = 0.8


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Config:
    """Runtime configuration — mirrors the global CLI flags.

    ``None`` / ``""`` mean "not set": those fields are resolved from the
    ``ROUNDPACK_*`` environment variables and then the built-in defaults.
    """

    # Session shape
    round_count: int | None = None
    capacity_minutes: int | None = None
    policy: str = ""
    startable_ratio: float = DEFAULT_STARTABLE_RATIO

    # Modes
    quick: bool = False
    pin_completed: bool = True

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.round_count is None:
            self.round_count = _env_int("ROUNDPACK_ROUNDS", DEFAULT_ROUND_COUNT)
        if self.capacity_minutes is None:
            self.capacity_minutes = _env_int("ROUNDPACK_CAPACITY", DEFAULT_CAPACITY_MINUTES)
        if not self.policy:
            self.policy = os.environ.get("ROUNDPACK_POLICY", "").strip() or FillPolicy.LEAST_FULL.value
        if self.quick:
            self.round_count = QUICK_ROUND_COUNT
            self.startable_ratio = QUICK_STARTABLE_RATIO

    def fill_policy(self) -> FillPolicy:
        try:
            return FillPolicy(self.policy.lower())
        except ValueError:
            allowed = ", ".join(p.value for p in FillPolicy)
            raise InvalidConfiguration(
                f"Unknown fill policy: {self.policy}. Valid policies: {allowed}."
            ) from None

    @property
    def planned_minutes(self) -> int:
        return self.round_count * self.capacity_minutes
