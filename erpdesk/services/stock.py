from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import Select, case, func, literal, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from erpdesk.core.cache import JSONCache, team_key
from erpdesk.core.exceptions import NotFoundError
from erpdesk.models import Category, Product, StockLevel, Warehouse
from erpdesk.schemas import (
    CategoryCreate,
    PaginatedResponse,
    SortField,
    SortOrder,
    StockListItem,
    StockListSummary,
    StockQueryParams,
    StockStatus,
)
from erpdesk.services.stock_utils import clamp_page, generate_pagination_info

logger = logging.getLogger(__name__)

available_stock = StockLevel.quantity - StockLevel.reserved_quantity
total_value = StockLevel.quantity * Product.unit_price

# Mirrors stock_utils.get_stock_status so status can be filtered in SQL.
stock_status = case(
    (available_stock <= 0, literal(StockStatus.OUT_OF_STOCK.value)),
    (available_stock <= Product.min_stock_level, literal(StockStatus.LOW_STOCK.value)),
    else_=literal(StockStatus.IN_STOCK.value),
)

SORT_COLUMNS: dict[SortField, Any] = {
    SortField.NAME: Product.name,
    SortField.SKU: Product.sku,
    SortField.CATEGORY: Category.name,
    SortField.WAREHOUSE: Warehouse.name,
    SortField.AVAILABLE_STOCK: available_stock,
    SortField.TOTAL_VALUE: total_value,
    SortField.UPDATED_AT: StockLevel.updated_at,
}


def stock_rows(team_id: uuid.UUID) -> Select[Any]:
    """Stock levels of active products joined with their catalog data."""
    return (
        select(
            StockLevel.id.label("id"),
            StockLevel.product_id.label("product_id"),
            StockLevel.warehouse_id.label("warehouse_id"),
            Product.name.label("product_name"),
            Product.sku.label("sku"),
            Category.name.label("category_name"),
            Warehouse.name.label("warehouse_name"),
            Warehouse.location.label("warehouse_location"),
            StockLevel.quantity.label("stock_quantity"),
            StockLevel.reserved_quantity.label("reserved_quantity"),
            available_stock.label("available_stock"),
            Product.min_stock_level.label("min_stock_level"),
            Product.max_stock_level.label("max_stock_level"),
            Product.unit_price.label("unit_price"),
            Product.cost_price.label("cost_price"),
            total_value.label("total_value"),
            stock_status.label("status"),
            StockLevel.updated_at.label("updated_at"),
        )
        .select_from(StockLevel)
        .join(Product, Product.id == StockLevel.product_id)
        .join(Warehouse, Warehouse.id == StockLevel.warehouse_id)
        .outerjoin(Category, Category.id == Product.category_id)
        .where(StockLevel.team_id == team_id)
        .where(Product.is_active.is_(True))
    )


def apply_stock_filters(stmt: Select[Any], params: StockQueryParams) -> Select[Any]:
    if params.search:
        # autoescape: "%" and "_" in the search text match literally
        stmt = stmt.where(
            or_(
                Product.name.icontains(params.search, autoescape=True),
                Product.sku.icontains(params.search, autoescape=True),
                Category.name.icontains(params.search, autoescape=True),
            )
        )
    if params.warehouse_id is not None:
        stmt = stmt.where(StockLevel.warehouse_id == params.warehouse_id)
    if params.category_id is not None:
        stmt = stmt.where(Product.category_id == params.category_id)
    if params.status is not None:
        stmt = stmt.where(stock_status == params.status.value)
    return stmt


def apply_stock_sort(stmt: Select[Any], sort_by: SortField, sort_order: SortOrder) -> Select[Any]:
    column = SORT_COLUMNS[sort_by]
    ordered = column.desc() if sort_order == SortOrder.DESC else column.asc()
    # Stable paging: break ties on the primary key.
    return stmt.order_by(ordered.nulls_last(), StockLevel.id)


async def get_stock_list(
    db: AsyncSession,
    team_id: uuid.UUID,
    params: StockQueryParams,
) -> PaginatedResponse[StockListItem]:
    """One page of the stock list. Out-of-range pages are clamped."""
    stmt = apply_stock_filters(stock_rows(team_id), params)

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = await db.scalar(count_stmt) or 0

    info = generate_pagination_info(params.page, params.limit, total)
    page = clamp_page(params.page, info.total_pages)
    if page != params.page:
        logger.debug("Clamped stock list page %s to %s", params.page, page)
        info = generate_pagination_info(page, params.limit, total)

    stmt = apply_stock_sort(stmt, params.sort_by, params.sort_order)
    stmt = stmt.offset((page - 1) * params.limit).limit(params.limit)

    result = await db.execute(stmt)
    items = [StockListItem.model_validate(dict(row)) for row in result.mappings().all()]

    return PaginatedResponse[StockListItem](
        items=items,
        total=total,
        page=page,
        page_size=params.limit,
        pages=info.total_pages,
        has_next=info.has_next,
        has_prev=info.has_prev,
    )


def stock_summary_query(team_id: uuid.UUID, warehouse_id: uuid.UUID | None = None) -> Select[Any]:
    stmt = (
        select(
            func.count(StockLevel.id).label("total_items"),
            func.coalesce(func.sum(total_value), 0).label("total_value"),
            func.count(StockLevel.id)
            .filter(stock_status == StockStatus.LOW_STOCK.value)
            .label("low_stock_items"),
            func.count(StockLevel.id)
            .filter(stock_status == StockStatus.OUT_OF_STOCK.value)
            .label("out_of_stock_items"),
            func.count(StockLevel.id)
            .filter(stock_status == StockStatus.IN_STOCK.value)
            .label("in_stock_items"),
        )
        .select_from(StockLevel)
        .join(Product, Product.id == StockLevel.product_id)
        .where(StockLevel.team_id == team_id)
        .where(Product.is_active.is_(True))
    )
    if warehouse_id is not None:
        stmt = stmt.where(StockLevel.warehouse_id == warehouse_id)
    return stmt


async def get_stock_list_summary(
    db: AsyncSession,
    team_id: uuid.UUID,
    warehouse_id: uuid.UUID | None = None,
) -> StockListSummary:
    result = await db.execute(stock_summary_query(team_id, warehouse_id))
    row = result.mappings().one()
    return StockListSummary.model_validate(dict(row))


async def get_cached_stock_list_summary(
    db: AsyncSession,
    cache: JSONCache,
    team_id: uuid.UUID,
    warehouse_id: uuid.UUID | None = None,
) -> StockListSummary:
    key = team_key(team_id, "stock-summary", warehouse_id or "all")

    cached = await cache.get(key)
    if cached is not None:
        return StockListSummary.model_validate(cached)

    summary = await get_stock_list_summary(db, team_id, warehouse_id)
    await cache.set(key, summary.model_dump())
    return summary


async def get_warehouses(db: AsyncSession, team_id: uuid.UUID) -> list[Warehouse]:
    stmt = (
        select(Warehouse)
        .where(Warehouse.team_id == team_id)
        .where(Warehouse.is_active.is_(True))
        .order_by(Warehouse.name)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_categories(db: AsyncSession, team_id: uuid.UUID) -> list[Category]:
    stmt = (
        select(Category)
        .where(Category.team_id == team_id)
        .where(Category.is_active.is_(True))
        .order_by(Category.name)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def create_category(
    db: AsyncSession,
    team_id: uuid.UUID,
    body: CategoryCreate,
) -> Category:
    if body.parent_id is not None:
        parent = await db.scalar(
            select(Category.id)
            .where(Category.id == body.parent_id)
            .where(Category.team_id == team_id)
        )
        if parent is None:
            raise NotFoundError("Parent category", body.parent_id)

    category = Category(team_id=team_id, **body.model_dump())
    db.add(category)
    await db.flush()
    await db.refresh(category)

    logger.info("Created category %s for team %s", category.name, team_id)
    return category
