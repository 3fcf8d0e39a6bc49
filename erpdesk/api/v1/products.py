from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, HTTPException, Query, Response

from erpdesk.api.deps import Cache, DbSession, TeamId
from erpdesk.core.exceptions import ConflictError, InsufficientStockError, NotFoundError
from erpdesk.schemas import (
    LowStockProduct,
    PaginatedResponse,
    ProductCreate,
    ProductDetail,
    ProductRead,
    ProductUpdate,
)
from erpdesk.services import products

router = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(e: NotFoundError | ConflictError | InsufficientStockError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail=e.message)
    return HTTPException(status_code=400, detail=e.message)


@router.get("/products", response_model=PaginatedResponse[ProductRead])
async def list_products(
    team_id: TeamId,
    db: DbSession,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = None,
    category_id: uuid.UUID | None = None,
    is_active: bool | None = None,
    low_stock: bool = False,
) -> PaginatedResponse[ProductRead]:
    """List products, newest first, with search and filters."""
    return await products.get_products(
        db,
        team_id,
        page=page,
        limit=limit,
        search=search.strip() if search else None,
        category_id=category_id,
        is_active=is_active,
        low_stock=low_stock,
    )


@router.get("/products/low-stock", response_model=list[LowStockProduct])
async def list_low_stock_products(team_id: TeamId, db: DbSession) -> list[LowStockProduct]:
    """Active products at or below their minimum stock level, lowest stock first."""
    return await products.get_low_stock_products(db, team_id)


@router.get("/products/{product_id}", response_model=ProductDetail)
async def get_product(product_id: uuid.UUID, team_id: TeamId, db: DbSession) -> ProductDetail:
    """Get a product with its stock per warehouse."""
    try:
        return await products.get_product(db, team_id, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e


@router.post("/products", response_model=ProductRead, status_code=201)
async def create_product(
    body: ProductCreate,
    team_id: TeamId,
    db: DbSession,
    cache: Cache,
) -> ProductRead:
    """Create a product, optionally with opening stock in one warehouse."""
    try:
        product = await products.create_product(db, team_id, body)
    except (NotFoundError, ConflictError, InsufficientStockError) as e:
        raise _http_error(e) from e

    await db.commit()
    await cache.invalidate_team(team_id)
    return ProductRead.model_validate(product)


@router.patch("/products/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: uuid.UUID,
    body: ProductUpdate,
    team_id: TeamId,
    db: DbSession,
    cache: Cache,
) -> ProductRead:
    """Update the fields present in the request body."""
    try:
        product = await products.update_product(db, team_id, product_id, body)
    except (NotFoundError, ConflictError) as e:
        raise _http_error(e) from e

    await db.commit()
    await cache.invalidate_team(team_id)
    return ProductRead.model_validate(product)


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(
    product_id: uuid.UUID,
    team_id: TeamId,
    db: DbSession,
    cache: Cache,
) -> Response:
    """Deactivate a product (soft delete)."""
    try:
        await products.delete_product(db, team_id, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e

    await db.commit()
    await cache.invalidate_team(team_id)
    return Response(status_code=204)
