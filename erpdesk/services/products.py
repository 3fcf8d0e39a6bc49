from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from erpdesk.core.exceptions import ConflictError, NotFoundError
from erpdesk.models import Category, Product, StockLevel, Warehouse
from erpdesk.schemas import (
    LowStockProduct,
    MovementType,
    PaginatedResponse,
    ProductCreate,
    ProductDetail,
    ProductRead,
    ProductUpdate,
    ProductWarehouseStock,
    StockMovementCreate,
)
from erpdesk.services.movements import record_stock_movement
from erpdesk.services.stock import available_stock
from erpdesk.services.stock_utils import clamp_page, generate_pagination_info

logger = logging.getLogger(__name__)

# Columns a partial update may clear; the rest ignore an explicit null.
_NULLABLE_FIELDS = frozenset({"description", "barcode", "category_id"})

# Available stock of a product summed over all of its warehouses.
product_available = (
    select(func.coalesce(func.sum(available_stock), 0))
    .where(StockLevel.product_id == Product.id)
    .correlate(Product)
    .scalar_subquery()
)


def product_query(
    team_id: uuid.UUID,
    search: str | None = None,
    category_id: uuid.UUID | None = None,
    is_active: bool | None = None,
    low_stock: bool = False,
) -> Select[Any]:
    stmt = select(Product).where(Product.team_id == team_id)
    if search:
        stmt = stmt.where(
            or_(
                Product.name.icontains(search, autoescape=True),
                Product.sku.icontains(search, autoescape=True),
                Product.barcode.icontains(search, autoescape=True),
            )
        )
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    if is_active is not None:
        stmt = stmt.where(Product.is_active.is_(is_active))
    if low_stock:
        stmt = stmt.where(product_available <= Product.min_stock_level)
    return stmt


def low_stock_query(team_id: uuid.UUID) -> Select[Any]:
    """Active products at or below their minimum level, emptiest first."""
    return (
        select(
            Product.id.label("id"),
            Product.sku.label("sku"),
            Product.name.label("name"),
            Category.name.label("category_name"),
            product_available.label("available_stock"),
            Product.min_stock_level.label("min_stock_level"),
        )
        .outerjoin(Category, Category.id == Product.category_id)
        .where(Product.team_id == team_id)
        .where(Product.is_active.is_(True))
        .where(product_available <= Product.min_stock_level)
        .order_by(product_available.asc(), Product.name)
    )


async def _get_team_product(db: AsyncSession, team_id: uuid.UUID, product_id: uuid.UUID) -> Product:
    product = await db.scalar(
        select(Product).where(Product.id == product_id).where(Product.team_id == team_id)
    )
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


async def _check_sku_free(
    db: AsyncSession,
    team_id: uuid.UUID,
    sku: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    stmt = select(Product.id).where(Product.team_id == team_id).where(Product.sku == sku)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    if await db.scalar(stmt) is not None:
        raise ConflictError("Product with this SKU already exists")


async def _check_category(db: AsyncSession, team_id: uuid.UUID, category_id: uuid.UUID | None) -> None:
    if category_id is None:
        return
    found = await db.scalar(
        select(Category.id).where(Category.id == category_id).where(Category.team_id == team_id)
    )
    if found is None:
        raise NotFoundError("Category", category_id)


async def _flush_product(db: AsyncSession, product: Product) -> None:
    # The (team_id, sku) unique constraint catches a concurrent writer the
    # lookup in _check_sku_free could not see.
    try:
        await db.flush()
    except IntegrityError as e:
        raise ConflictError("Product with this SKU already exists") from e
    await db.refresh(product)


async def get_products(
    db: AsyncSession,
    team_id: uuid.UUID,
    page: int = 1,
    limit: int = 20,
    search: str | None = None,
    category_id: uuid.UUID | None = None,
    is_active: bool | None = None,
    low_stock: bool = False,
) -> PaginatedResponse[ProductRead]:
    """Products of a team, newest first."""
    stmt = product_query(team_id, search, category_id, is_active, low_stock)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    page = clamp_page(page, generate_pagination_info(page, limit, total).total_pages)
    info = generate_pagination_info(page, limit, total)

    stmt = stmt.order_by(Product.created_at.desc(), Product.id)
    stmt = stmt.offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return PaginatedResponse[ProductRead](
        items=[ProductRead.model_validate(p) for p in result.scalars().all()],
        total=total,
        page=page,
        page_size=limit,
        pages=info.total_pages,
        has_next=info.has_next,
        has_prev=info.has_prev,
    )


async def get_product(db: AsyncSession, team_id: uuid.UUID, product_id: uuid.UUID) -> ProductDetail:
    """One product with its stock in every warehouse that holds it."""
    product = await _get_team_product(db, team_id, product_id)

    category_name = None
    if product.category_id is not None:
        category_name = await db.scalar(select(Category.name).where(Category.id == product.category_id))

    result = await db.execute(
        select(
            StockLevel.warehouse_id.label("warehouse_id"),
            Warehouse.name.label("warehouse_name"),
            StockLevel.quantity.label("quantity"),
            StockLevel.reserved_quantity.label("reserved_quantity"),
            available_stock.label("available_stock"),
        )
        .join(Warehouse, Warehouse.id == StockLevel.warehouse_id)
        .where(StockLevel.product_id == product.id)
        .where(StockLevel.team_id == team_id)
        .order_by(Warehouse.name)
    )
    stock = [ProductWarehouseStock.model_validate(dict(row)) for row in result.mappings().all()]

    return ProductDetail(
        **ProductRead.model_validate(product).model_dump(),
        category_name=category_name,
        total_available=sum(s.available_stock for s in stock),
        stock=stock,
    )


async def create_product(db: AsyncSession, team_id: uuid.UUID, body: ProductCreate) -> Product:
    """Create a product; opening stock is booked as an "in" movement."""
    await _check_sku_free(db, team_id, body.sku)
    await _check_category(db, team_id, body.category_id)

    product = Product(
        team_id=team_id,
        **body.model_dump(exclude={"initial_stock", "warehouse_id"}),
    )
    db.add(product)
    await _flush_product(db, product)

    if body.initial_stock > 0 and body.warehouse_id is not None:
        await record_stock_movement(
            db,
            team_id,
            StockMovementCreate(
                product_id=product.id,
                warehouse_id=body.warehouse_id,
                type=MovementType.IN,
                quantity=body.initial_stock,
                reason="Initial stock",
            ),
        )

    logger.info("Created product %s for team %s", product.sku, team_id)
    return product


async def update_product(
    db: AsyncSession,
    team_id: uuid.UUID,
    product_id: uuid.UUID,
    body: ProductUpdate,
) -> Product:
    product = await _get_team_product(db, team_id, product_id)

    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if "sku" in changes and changes["sku"] != product.sku:
        await _check_sku_free(db, team_id, changes["sku"], exclude_id=product.id)
    if changes.get("category_id") is not None:
        await _check_category(db, team_id, changes["category_id"])

    for field, value in changes.items():
        setattr(product, field, value)
    await _flush_product(db, product)

    logger.info("Updated product %s (%s)", product.sku, ", ".join(sorted(changes)) or "no changes")
    return product


async def delete_product(db: AsyncSession, team_id: uuid.UUID, product_id: uuid.UUID) -> None:
    """Soft delete: the product leaves stock lists, its ledger stays."""
    product = await _get_team_product(db, team_id, product_id)
    product.is_active = False
    await db.flush()
    logger.info("Deactivated product %s for team %s", product.sku, team_id)


async def get_low_stock_products(db: AsyncSession, team_id: uuid.UUID) -> list[LowStockProduct]:
    result = await db.execute(low_stock_query(team_id))
    return [LowStockProduct.model_validate(dict(row)) for row in result.mappings().all()]
