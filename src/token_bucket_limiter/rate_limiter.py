"""In-memory token bucket used as a call-admission gate."""

from __future__ import annotations

import math
from contextlib import AbstractContextManager, nullcontext
from numbers import Real
from threading import Lock

from .clock import Clock, system_clock


class InvalidConfigurationError(ValueError):
    """Raised when a bucket is constructed with unusable parameters."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"{field} must be a positive finite number, got {value!r}")
        self.field = field
        self.value = value


def _require_positive(field: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidConfigurationError(field, value)
    try:
        number = float(value)
    except OverflowError as exc:
        raise InvalidConfigurationError(field, value) from exc
    if not math.isfinite(number) or number <= 0:
        raise InvalidConfigurationError(field, value)
    return number


class TokenBucket:
    """Token bucket that refills continuously and admits one call per token.

    The bucket starts full. Each ``try_acquire`` folds the time elapsed since
    the previous call into the token count (capped at ``capacity``) and then
    consumes a single token if one is available.

    With ``thread_safe=True`` the refill and the decrement happen under one
    lock, so a bucket can be shared across threads. Pass ``thread_safe=False``
    only when a single owner calls the bucket.
    """

    def __init__(
        self,
        capacity: float,
        refill_rate: float,
        *,
        clock: Clock | None = None,
        thread_safe: bool = True,
    ) -> None:
        self._capacity = _require_positive("capacity", capacity)
        self._refill_rate = _require_positive("refill_rate", refill_rate)
        self._clock: Clock = clock or system_clock
        self._lock: AbstractContextManager[object] = Lock() if thread_safe else nullcontext()
        self._tokens = self._capacity
        self._last_refill = self._clock()

    @property
    def capacity(self) -> float:
        return self._capacity

    @property
    def refill_rate(self) -> float:
        return self._refill_rate

    @property
    def tokens(self) -> float:
        """Token count as of the last admission check (no refill applied)."""

        with self._lock:
            return self._tokens

    @property
    def last_refill_time(self) -> float:
        with self._lock:
            return self._last_refill

    def try_acquire(self) -> bool:
        """Consume one token if available; returns True when admitted."""

        with self._lock:
            now = self._clock()
            # A clock reading behind the last refill counts as no elapsed time.
            if now > self._last_refill:
                elapsed = now - self._last_refill
                self._tokens = min(self._capacity, self._tokens + elapsed * self._refill_rate)
                self._last_refill = now
            if self._tokens >= 1:
                self._tokens -= 1
                return True
            return False

    def __repr__(self) -> str:
        return f"TokenBucket(capacity={self._capacity!r}, refill_rate={self._refill_rate!r})"
