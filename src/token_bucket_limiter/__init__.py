"""In-process token bucket rate limiter."""

from .clock import Clock, ManualClock, system_clock
from .rate_limiter import InvalidConfigurationError, TokenBucket

__all__ = ["Clock", "InvalidConfigurationError", "ManualClock", "TokenBucket", "system_clock"]
