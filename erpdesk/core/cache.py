from __future__ import annotations

import json
import logging
import uuid
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from erpdesk.core.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "erpdesk"


def team_key(team_id: uuid.UUID, *parts: object) -> str:
    """Build a cache key namespaced by team, e.g. ``erpdesk:<team>:stock-summary:all``."""
    return ":".join([KEY_PREFIX, str(team_id), *(str(p) for p in parts)])


class JSONCache:
    """Small JSON-over-Redis cache.

    Redis failures are logged and treated as cache misses so a broken cache
    never fails the request that hit it.
    """

    def __init__(self, redis: aioredis.Redis, default_ttl: int | None = None) -> None:
        self.redis = redis
        self.default_ttl = default_ttl or settings.stock_summary_cache_ttl

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        try:
            await self.redis.set(key, json.dumps(value, default=str), ex=ttl or self.default_ttl)
        except RedisError as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    async def invalidate_team(self, team_id: uuid.UUID) -> int:
        """Delete every cached entry of a team. Returns the number of keys removed."""
        pattern = team_key(team_id, "*")
        removed = 0
        try:
            keys = [key async for key in self.redis.scan_iter(match=pattern)]
            if keys:
                removed = int(await self.redis.delete(*keys))
        except RedisError as e:
            logger.warning("Cache invalidation failed for team %s: %s", team_id, e)
        return removed
