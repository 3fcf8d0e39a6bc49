from __future__ import annotations

from collections.abc import AsyncGenerator

import redis.asyncio as aioredis

from erpdesk.core.config import settings

# Cache-only client: short timeouts so a stalled Redis degrades to cache misses.
redis_client: aioredis.Redis = aioredis.from_url(  # type: ignore[no-untyped-call]
    settings.redis_url,
    decode_responses=True,
    socket_timeout=settings.redis_socket_timeout,
    socket_connect_timeout=settings.redis_socket_timeout,
    health_check_interval=30,
)


async def get_redis() -> AsyncGenerator[aioredis.Redis]:
    yield redis_client


async def close_redis() -> None:
    await redis_client.aclose()
