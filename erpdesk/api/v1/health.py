from __future__ import annotations

import time
from collections.abc import Awaitable
from typing import Any, Literal

from fastapi import APIRouter, Depends
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from erpdesk import __version__
from erpdesk.api.deps import get_db, get_redis
from erpdesk.core.config import settings
from erpdesk.schemas import DependencyHealth, HealthCheckResponse

router = APIRouter()


async def _check_dependency(name: Literal["redis", "database"], check: Awaitable[Any]) -> DependencyHealth:
    start = time.monotonic()
    try:
        await check
    except Exception as exc:
        return DependencyHealth(name=name, status="error", message=str(exc))
    latency = (time.monotonic() - start) * 1000
    return DependencyHealth(name=name, status="ok", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    redis: Redis = Depends(get_redis),
    db: AsyncSession = Depends(get_db),
) -> HealthCheckResponse:
    """Ping the summary cache and the stock database."""
    dependencies = {
        "redis": await _check_dependency("redis", redis.ping()),
        "database": await _check_dependency("database", db.execute(text("SELECT 1"))),
    }
    healthy = all(dep.status == "ok" for dep in dependencies.values())

    return HealthCheckResponse(
        status="ok" if healthy else "degraded",
        version=__version__,
        environment=settings.app_env,
        dependencies=dependencies,
    )
