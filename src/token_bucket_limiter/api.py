"""FastAPI gateway that admits requests through a token bucket."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, HTTPException, status

from .config import LimiterConfig, build_bucket, config
from .rate_limiter import TokenBucket
from .schemas import AdmissionRequest, AdmissionResponse, APIError, LimiterSettings

logger = logging.getLogger("token_bucket_limiter.api")

app = FastAPI(
    title="Token Bucket Limiter Gateway",
    version="0.1.0",
    description="Sample service that gates incoming work with an in-process token bucket.",
)


def _build_rate_limiter(cfg: LimiterConfig) -> TokenBucket | None:
    if not cfg.enabled:
        return None
    return build_bucket(cfg)


_rate_limiter = _build_rate_limiter(config)


@app.get("/health")
def health() -> dict[str, str]:
    """Lightweight health probe for orchestration/monitoring."""

    return {"status": "ok"}


@app.get("/v1/limiter", response_model=LimiterSettings)
def limiter_settings() -> LimiterSettings:
    return LimiterSettings(
        enabled=config.enabled,
        capacity=config.capacity,
        refill_rate=config.refill_rate,
    )


@app.post("/v1/requests", response_model=AdmissionResponse)
def submit_request(request: AdmissionRequest) -> AdmissionResponse:
    _enforce_rate_limit("POST /v1/requests", request.request_id)
    return AdmissionResponse(request_id=request.request_id, received_at=datetime.now(UTC))


def _enforce_rate_limit(route: str, request_id: str | None) -> None:
    limiter = _rate_limiter
    if limiter is None:
        return
    if limiter.try_acquire():
        return
    logger.info(
        "route=%s request_id=%s decision=rejected capacity=%.2f refill_rate=%.2f",
        route,
        request_id,
        limiter.capacity,
        limiter.refill_rate,
    )
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=APIError(
            request_id=request_id,
            error_type="rate_limited",
            message="Request rate exceeded configured limit.",
            stage="rate_limit",
            details={"capacity": limiter.capacity, "refill_rate": limiter.refill_rate},
        ).model_dump(),
    )
