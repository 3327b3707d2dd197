"""Monotonic clock sources for the token bucket."""

from __future__ import annotations

import math
from collections.abc import Callable
from time import monotonic

Clock = Callable[[], float]
"""Zero-argument callable returning a monotonic reading in seconds."""


def system_clock() -> float:
    """Return the process monotonic clock in seconds."""

    return monotonic()


class ManualClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def __call__(self) -> float:
        return self._now

    @property
    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move the clock forward and return the new reading."""

        if not math.isfinite(seconds) or seconds < 0:
            raise ValueError(f"ManualClock can only advance by a finite non-negative amount, got {seconds!r}")
        self._now += seconds
        return self._now
