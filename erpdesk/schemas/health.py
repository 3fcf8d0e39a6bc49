from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class DependencyHealth(BaseModel):
    name: Literal["redis", "database"]
    status: Literal["ok", "error"]
    latency_ms: float | None = None
    message: str | None = None


class HealthCheckResponse(BaseModel):
    """Service status; ``degraded`` when Redis or PostgreSQL fails its ping."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    dependencies: dict[str, DependencyHealth]
