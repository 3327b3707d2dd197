from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from token_bucket_limiter import api as api_module
from token_bucket_limiter.api import app
from token_bucket_limiter.clock import ManualClock
from token_bucket_limiter.config import build_bucket

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_api_config() -> Iterator[None]:
    original_cfg = api_module.config
    original_limiter = api_module._rate_limiter
    yield
    api_module.config = original_cfg
    api_module._rate_limiter = original_limiter


def _override_api_config(clock: ManualClock | None = None, **overrides) -> None:
    new_cfg = replace(api_module.config, **overrides)
    api_module.config = new_cfg
    if new_cfg.enabled:
        api_module._rate_limiter = build_bucket(new_cfg, clock=clock or ManualClock())
    else:
        api_module._rate_limiter = api_module._build_rate_limiter(new_cfg)


def _error_type(response):
    data = response.json()
    if "error_type" in data:
        return data["error_type"]
    return data.get("detail", {}).get("error_type")


def test_health_endpoint() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_limiter_settings_hide_token_count() -> None:
    _override_api_config(capacity=4, refill_rate=2.0)

    response = client.get("/v1/limiter")
    assert response.status_code == 200
    assert response.json() == {"enabled": True, "capacity": 4.0, "refill_rate": 2.0}


def test_request_admitted() -> None:
    _override_api_config(capacity=1, refill_rate=1.0)

    response = client.post("/v1/requests", json={"request_id": "req-1", "payload": "hello"})
    assert response.status_code == 200
    body = response.json()
    assert body["request_id"] == "req-1"
    assert body["admitted"] is True
    assert "received_at" in body


def test_rate_limiter_returns_429_until_refill(caplog) -> None:
    clock = ManualClock()
    _override_api_config(clock=clock, capacity=2, refill_rate=1.0)

    statuses = [client.post("/v1/requests", json={"request_id": f"burst-{i}"}).status_code for i in range(3)]
    assert statuses == [200, 200, 429]

    with caplog.at_level(logging.INFO, logger="token_bucket_limiter.api"):
        rejected = client.post("/v1/requests", json={"request_id": "burst-3"})
    assert rejected.status_code == 429
    assert _error_type(rejected) == "rate_limited"
    assert rejected.json()["detail"]["request_id"] == "burst-3"
    assert "decision=rejected" in caplog.text

    clock.advance(1.0)
    assert client.post("/v1/requests", json={"request_id": "after-wait"}).status_code == 200


def test_disabled_gate_admits_everything() -> None:
    _override_api_config(enabled=False, capacity=1, refill_rate=1.0)

    statuses = {client.post("/v1/requests", json={"request_id": f"r-{i}"}).status_code for i in range(5)}
    assert statuses == {200}
    assert client.get("/v1/limiter").json()["enabled"] is False


def test_invalid_payload_rejected_before_limiter() -> None:
    _override_api_config(capacity=1, refill_rate=1.0)

    response = client.post("/v1/requests", json={"request_id": ""})
    assert response.status_code == 422
    assert client.post("/v1/requests", json={"request_id": "still-has-token"}).status_code == 200
