"""Pydantic models for the sample admission gateway."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AdmissionRequest(BaseModel):
    """Unit of work submitted to the gateway."""

    request_id: str = Field(..., min_length=1, description="Caller-assigned identifier echoed back.")
    payload: str | None = Field(default=None, description="Opaque body; the limiter never inspects it.")


class AdmissionResponse(BaseModel):
    """Acknowledgement returned when a request is admitted."""

    request_id: str
    admitted: bool = True
    received_at: datetime


class LimiterSettings(BaseModel):
    """Public view of the configured limits."""

    enabled: bool
    capacity: float = Field(..., description="Maximum burst size.")
    refill_rate: float = Field(..., description="Tokens added per second.")


class APIError(BaseModel):
    """Error payload surfaced in HTTP error details."""

    request_id: str | None = None
    error_type: str
    message: str
    stage: str
    details: dict[str, Any] | None = None
