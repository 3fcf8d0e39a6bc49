from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, HTTPException, Query

from erpdesk.api.deps import Cache, DbSession, TeamId
from erpdesk.core.exceptions import InsufficientStockError, NotFoundError
from erpdesk.schemas import PaginatedResponse, StockMovementCreate, StockMovementRead
from erpdesk.services import movements

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/movements", response_model=StockMovementRead, status_code=201)
async def create_stock_movement(
    body: StockMovementCreate,
    team_id: TeamId,
    db: DbSession,
    cache: Cache,
) -> StockMovementRead:
    """Book stock in, out, or an absolute adjustment for one warehouse."""
    try:
        movement = await movements.record_stock_movement(db, team_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except InsufficientStockError as e:
        logger.warning(
            "Rejected %s of %s on product %s: only %s on hand",
            body.type.value,
            body.quantity,
            body.product_id,
            e.current,
        )
        raise HTTPException(status_code=400, detail=e.message) from e

    # Commit before dropping cached summaries so a refill cannot see the old stock.
    await db.commit()
    await cache.invalidate_team(team_id)
    return StockMovementRead.model_validate(movement)


@router.get(
    "/products/{product_id}/movements",
    response_model=PaginatedResponse[StockMovementRead],
)
async def get_stock_movements(
    product_id: uuid.UUID,
    team_id: TeamId,
    db: DbSession,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[StockMovementRead]:
    """Stock movements of a product, newest first."""
    return await movements.get_stock_movements(db, team_id, product_id, page=page, limit=limit)
