from __future__ import annotations

import uuid
from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from erpdesk.core.cache import JSONCache
from erpdesk.core.database import get_db
from erpdesk.core.redis import get_redis
from erpdesk.models import Team


async def get_cache(redis: aioredis.Redis = Depends(get_redis)) -> JSONCache:
    return JSONCache(redis)


async def get_team_id(
    team_id: Annotated[uuid.UUID, Path()],
    db: AsyncSession = Depends(get_db),
) -> uuid.UUID:
    """Resolve the tenant from the URL; unknown or inactive teams are a 404."""
    team = await db.get(Team, team_id)
    if team is None or not team.is_active:
        raise HTTPException(status_code=404, detail="Team not found")
    return team_id


DbSession = Annotated[AsyncSession, Depends(get_db)]
TeamId = Annotated[uuid.UUID, Depends(get_team_id)]
Cache = Annotated[JSONCache, Depends(get_cache)]

# Re-export for convenient imports
__all__ = ["Cache", "DbSession", "TeamId", "get_cache", "get_db", "get_redis", "get_team_id"]
