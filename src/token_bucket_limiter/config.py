"""Runtime configuration and environment helpers for the limiter."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .clock import Clock
from .rate_limiter import TokenBucket

_DEFAULT_CAPACITY = 10.0
_DEFAULT_REFILL_RATE = 5.0


@dataclass(frozen=True)
class LimiterConfig:
    """Immutable limiter configuration."""

    enabled: bool
    capacity: float
    refill_rate: float


def _parse_bool(value: str | None, fallback: bool) -> bool:
    if value is None:
        return fallback
    return value.lower() in {"1", "true", "yes", "on"}


def _parse_float(value: str | None, fallback: float) -> float:
    if value is None:
        return fallback
    try:
        return float(value)
    except ValueError:
        return fallback


def load_config() -> LimiterConfig:
    """Load configuration from environment variables, applying defaults.

    Values that fail to parse fall back to the defaults. Parsed values are
    not range-checked here; ``build_bucket`` rejects non-positive ones.
    """

    return LimiterConfig(
        enabled=_parse_bool(os.getenv("TBL_ENABLED"), True),
        capacity=_parse_float(os.getenv("TBL_CAPACITY"), _DEFAULT_CAPACITY),
        refill_rate=_parse_float(os.getenv("TBL_REFILL_RATE"), _DEFAULT_REFILL_RATE),
    )


def build_bucket(cfg: LimiterConfig, clock: Clock | None = None) -> TokenBucket:
    """Construct a locked bucket from configuration; raises on invalid limits.

    Configured buckets back shared services, so locking is always on.
    """

    return TokenBucket(cfg.capacity, cfg.refill_rate, clock=clock)


config = load_config()
"""Singleton config loaded at import time for convenience."""
