from __future__ import annotations

import pytest

from token_bucket_limiter.clock import ManualClock


@pytest.fixture()
def manual_clock() -> ManualClock:
    return ManualClock(start=100.0)
