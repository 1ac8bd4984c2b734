"""Pydantic models for health endpoints."""

from datetime import datetime, timezone
from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Response model for service health checks."""

    status: str = "ok"
    service: str = "HolidayHome AI API"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
