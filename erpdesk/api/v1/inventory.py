from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from erpdesk.api.deps import Cache, DbSession, TeamId
from erpdesk.core.config import settings
from erpdesk.core.exceptions import NotFoundError
from erpdesk.schemas import (
    CategoryCreate,
    CategoryRead,
    MonthlyInventoryValue,
    PaginatedResponse,
    SortOrder,
    StockListItem,
    StockListSummary,
    StockSummaryQueryParams,
    WarehouseRead,
)
from erpdesk.services import reports, stock
from erpdesk.services.stock_filters import StockFilters, resolve_sort_field

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stock", response_model=PaginatedResponse[StockListItem])
async def get_stock_list(
    team_id: TeamId,
    db: DbSession,
    search: str = "",
    warehouse_id: str = Query("all", description="Warehouse UUID or 'all'"),
    category_id: str = Query("all", description="Category UUID or 'all'"),
    status: str = Query("all", description="in_stock | low_stock | out_of_stock | all"),
    sort_by: str = Query("name", description="Column key; camelCase aliases accepted"),
    sort_order: SortOrder = SortOrder.ASC,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.stock_default_page_size, ge=1, le=settings.stock_max_page_size),
) -> PaginatedResponse[StockListItem]:
    """List stock per product and warehouse with search, filters, sorting and paging."""
    try:
        filters = StockFilters(
            search=search,
            warehouse_id=warehouse_id,
            category_id=category_id,
            status=status,
            sort_by=resolve_sort_field(sort_by),
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
        params = filters.to_query_params()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return await stock.get_stock_list(db, team_id, params)


@router.get("/stock/summary", response_model=StockListSummary)
async def get_stock_list_summary(
    team_id: TeamId,
    db: DbSession,
    cache: Cache,
    params: Annotated[StockSummaryQueryParams, Query()],
) -> StockListSummary:
    """Aggregate counts and value of the stock list (cached briefly per team)."""
    return await stock.get_cached_stock_list_summary(db, cache, team_id, params.warehouse_id)


@router.get("/warehouses", response_model=list[WarehouseRead])
async def get_warehouses(team_id: TeamId, db: DbSession) -> list[WarehouseRead]:
    """Active warehouses, by name."""
    warehouses = await stock.get_warehouses(db, team_id)
    return [WarehouseRead.model_validate(w) for w in warehouses]


@router.get("/categories", response_model=list[CategoryRead])
async def get_categories(team_id: TeamId, db: DbSession) -> list[CategoryRead]:
    """Active product categories, by name."""
    categories = await stock.get_categories(db, team_id)
    return [CategoryRead.model_validate(c) for c in categories]


@router.post("/categories", response_model=CategoryRead, status_code=201)
async def create_category(
    body: CategoryCreate,
    team_id: TeamId,
    db: DbSession,
) -> CategoryRead:
    """Create a product category."""
    try:
        category = await stock.create_category(db, team_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return CategoryRead.model_validate(category)


@router.get("/monthly-value", response_model=list[MonthlyInventoryValue])
async def get_monthly_inventory_value(
    team_id: TeamId,
    db: DbSession,
    months: int = Query(settings.inventory_value_months, ge=1, le=36),
) -> list[MonthlyInventoryValue]:
    """Month-end inventory value for the dashboard chart."""
    return await reports.get_monthly_inventory_value(db, team_id, months=months)
