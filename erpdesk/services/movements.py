from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_upsert
from sqlalchemy.ext.asyncio import AsyncSession

from erpdesk.core.exceptions import InsufficientStockError, NotFoundError
from erpdesk.models import Product, StockLevel, StockMovement, Warehouse
from erpdesk.schemas import MovementType, PaginatedResponse, StockMovementCreate, StockMovementRead
from erpdesk.services.stock_utils import clamp_page, generate_pagination_info

logger = logging.getLogger(__name__)


def apply_movement(
    current: int,
    movement_type: MovementType,
    quantity: int,
    reserved: int = 0,
) -> tuple[int, int]:
    """Return ``(new_quantity, signed_delta)`` for a movement against ``current``.

    ``in`` and ``out`` move ``abs(quantity)``; ``adjustment`` sets the on-hand
    quantity to ``quantity``.

    Raises:
        InsufficientStockError: if the result would drop below the ``reserved``
            quantity (and so below zero).
    """
    if movement_type == MovementType.IN:
        new_quantity = current + abs(quantity)
    elif movement_type == MovementType.OUT:
        new_quantity = current - abs(quantity)
    else:
        new_quantity = quantity

    if new_quantity < reserved:
        raise InsufficientStockError(current=current, requested=quantity)

    return new_quantity, new_quantity - current


async def record_stock_movement(
    db: AsyncSession,
    team_id: uuid.UUID,
    body: StockMovementCreate,
) -> StockMovement:
    """Write a ledger entry and update the product's stock in that warehouse."""
    product_id = await db.scalar(
        select(Product.id).where(Product.id == body.product_id).where(Product.team_id == team_id)
    )
    if product_id is None:
        raise NotFoundError("Product", body.product_id)

    warehouse_id = await db.scalar(
        select(Warehouse.id)
        .where(Warehouse.id == body.warehouse_id)
        .where(Warehouse.team_id == team_id)
    )
    if warehouse_id is None:
        raise NotFoundError("Warehouse", body.warehouse_id)

    # Make sure the row exists so the lock below also covers the first movement.
    await db.execute(
        pg_upsert(StockLevel)
        .values(
            team_id=team_id,
            product_id=body.product_id,
            warehouse_id=body.warehouse_id,
            quantity=0,
            reserved_quantity=0,
        )
        .on_conflict_do_nothing(index_elements=["product_id", "warehouse_id"])
    )
    level = await db.scalar(
        select(StockLevel)
        .where(StockLevel.product_id == body.product_id)
        .where(StockLevel.warehouse_id == body.warehouse_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    current = level.quantity

    new_quantity, delta = apply_movement(
        current, body.type, body.quantity, reserved=level.reserved_quantity
    )
    level.quantity = new_quantity

    movement = StockMovement(
        team_id=team_id,
        product_id=body.product_id,
        warehouse_id=body.warehouse_id,
        movement_type=body.type.value,
        quantity=delta,
        reason=body.reason,
        reference=body.reference,
        notes=body.notes,
    )
    db.add(movement)
    await db.flush()
    await db.refresh(movement)

    logger.info(
        "Stock movement %s on product %s in warehouse %s: %s -> %s",
        body.type.value,
        body.product_id,
        body.warehouse_id,
        current,
        new_quantity,
    )
    return movement


async def get_stock_movements(
    db: AsyncSession,
    team_id: uuid.UUID,
    product_id: uuid.UUID,
    page: int = 1,
    limit: int = 20,
) -> PaginatedResponse[StockMovementRead]:
    """Movements of one product, newest first."""
    stmt = (
        select(StockMovement)
        .where(StockMovement.team_id == team_id)
        .where(StockMovement.product_id == product_id)
    )

    total = await db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    info = generate_pagination_info(page, limit, total)
    page = clamp_page(page, info.total_pages)
    info = generate_pagination_info(page, limit, total)

    stmt = stmt.order_by(StockMovement.created_at.desc(), StockMovement.id)
    stmt = stmt.offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return PaginatedResponse[StockMovementRead](
        items=[StockMovementRead.model_validate(m) for m in result.scalars().all()],
        total=total,
        page=page,
        page_size=limit,
        pages=info.total_pages,
        has_next=info.has_next,
        has_prev=info.has_prev,
    )
