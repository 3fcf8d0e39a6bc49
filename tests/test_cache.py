import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from erpdesk.core.cache import JSONCache, team_key

TEAM_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


def test_team_key() -> None:
    assert team_key(TEAM_ID, "stock-summary", "all") == f"erpdesk:{TEAM_ID}:stock-summary:all"


@pytest.mark.asyncio
async def test_get_decodes_json() -> None:
    redis = AsyncMock()
    redis.get.return_value = b'{"total_items": 3}'

    assert await JSONCache(redis).get("k") == {"total_items": 3}


@pytest.mark.asyncio
async def test_get_miss_and_garbage() -> None:
    redis = AsyncMock()
    cache = JSONCache(redis)

    redis.get.return_value = None
    assert await cache.get("k") is None

    redis.get.return_value = "{not json"
    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_set_uses_default_ttl() -> None:
    redis = AsyncMock()

    await JSONCache(redis, default_ttl=60).set("k", {"total_value": 12.5})

    redis.set.assert_awaited_once_with("k", json.dumps({"total_value": 12.5}), ex=60)


@pytest.mark.asyncio
async def test_redis_errors_are_cache_misses() -> None:
    redis = AsyncMock()
    redis.get.side_effect = RedisConnectionError("down")
    redis.set.side_effect = RedisConnectionError("down")
    cache = JSONCache(redis)

    assert await cache.get("k") is None
    await cache.set("k", {"a": 1})


@pytest.mark.asyncio
async def test_invalidate_team() -> None:
    keys = [team_key(TEAM_ID, "stock-summary", "all"), team_key(TEAM_ID, "stock-summary", "wh")]

    async def _scan(match: str):  # type: ignore[no-untyped-def]
        assert match == f"erpdesk:{TEAM_ID}:*"
        for key in keys:
            yield key

    redis = AsyncMock()
    redis.scan_iter = MagicMock(side_effect=_scan)
    redis.delete.return_value = 2

    assert await JSONCache(redis).invalidate_team(TEAM_ID) == 2
    redis.delete.assert_awaited_once_with(*keys)


@pytest.mark.asyncio
async def test_invalidate_team_no_keys() -> None:
    async def _scan(match: str):  # type: ignore[no-untyped-def]
        return
        yield

    redis = AsyncMock()
    redis.scan_iter = MagicMock(side_effect=_scan)

    assert await JSONCache(redis).invalidate_team(TEAM_ID) == 0
    redis.delete.assert_not_called()
