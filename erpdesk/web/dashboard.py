"""Server-rendered dashboard pages."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from erpdesk.api.deps import Cache, DbSession, TeamId
from erpdesk.core.config import settings
from erpdesk.schemas import SortField, SortOrder
from erpdesk.services import stock
from erpdesk.services.stock_filters import StockFilters, resolve_sort_field
from erpdesk.services.stock_utils import (
    STOCK_CONSTANTS,
    format_date,
    format_number,
    format_usd,
    generate_pagination_info,
    get_stock_status_label,
    get_visible_pages,
    should_render_pagination,
)

router = APIRouter()
logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["usd"] = format_usd
templates.env.filters["number"] = format_number
templates.env.filters["date"] = format_date
templates.env.filters["status_label"] = get_stock_status_label

STOCK_COLUMNS: list[tuple[str, SortField | None]] = [
    ("Nama Produk", SortField.NAME),
    ("SKU", SortField.SKU),
    ("Kategori", SortField.CATEGORY),
    ("Gudang", SortField.WAREHOUSE),
    ("Stok Tersedia", SortField.AVAILABLE_STOCK),
    ("Total Nilai", SortField.TOTAL_VALUE),
    ("Status", None),
    ("Terakhir Diperbarui", SortField.UPDATED_AT),
]


def _href(filters: StockFilters) -> str:
    return "?" + urlencode(filters.to_url_params())


def sort_headers(filters: StockFilters) -> list[dict[str, Any]]:
    headers = []
    for label, field in STOCK_COLUMNS:
        header: dict[str, Any] = {"label": label, "href": None, "indicator": ""}
        if field is not None:
            header["href"] = _href(filters.update_sort(field))
            if field == filters.sort_by:
                header["indicator"] = "↑" if filters.sort_order == SortOrder.ASC else "↓"
        headers.append(header)
    return headers


def pagination_context(filters: StockFilters, total: int) -> dict[str, Any] | None:
    """Links for the pagination controls, or ``None`` when there is nothing to page."""
    if not should_render_pagination(total):
        return None

    info = generate_pagination_info(filters.page, filters.limit, total)
    pages = [
        {"number": p, "href": _href(filters.update_page(p)), "current": p == filters.page}
        if isinstance(p, int)
        else {"number": p, "href": None, "current": False}
        for p in get_visible_pages(filters.page, info.total_pages)
    ]
    return {
        "info": info,
        "total": total,
        "pages": pages,
        "first_href": _href(filters.update_page(1)) if info.has_prev else None,
        "prev_href": _href(filters.update_page(filters.page - 1)) if info.has_prev else None,
        "next_href": _href(filters.update_page(filters.page + 1)) if info.has_next else None,
        "last_href": _href(filters.update_page(info.total_pages)) if info.has_next else None,
    }


@router.get("/teams/{team_id}/inventory/stock-list", response_class=HTMLResponse)
async def stock_list_page(
    request: Request,
    team_id: TeamId,
    db: DbSession,
    cache: Cache,
    search: str = "",
    warehouse_id: str = "all",
    category_id: str = "all",
    status: str = "all",
    sort_by: str = "name",
    sort_order: SortOrder = SortOrder.ASC,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.stock_default_page_size, ge=1, le=settings.stock_max_page_size),
) -> HTMLResponse:
    """Stock list page: summary cards, filterable sortable table, pagination."""
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
        summary_params = filters.to_summary_params()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    context: dict[str, Any] = {
        "team_id": team_id,
        "filters": filters,
        "error": None,
        "debounce_ms": STOCK_CONSTANTS.DEBOUNCE_DELAY,
    }
    try:
        result = await stock.get_stock_list(db, team_id, params)
        summary = await stock.get_cached_stock_list_summary(
            db, cache, team_id, summary_params.warehouse_id
        )
        warehouses = await stock.get_warehouses(db, team_id)
        categories = await stock.get_categories(db, team_id)
    except Exception as e:
        logger.error(f"Error loading stock list for team {team_id}: {e}")
        context["error"] = str(e)
        return templates.TemplateResponse(request, "stock_list.html", context, status_code=500)

    filters = filters.update_page(result.page)
    context.update(
        filters=filters,
        items=result.items,
        summary=summary,
        warehouses=warehouses,
        categories=categories,
        headers=sort_headers(filters),
        pagination=pagination_context(filters, result.total),
    )
    return templates.TemplateResponse(request, "stock_list.html", context)
