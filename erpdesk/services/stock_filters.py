from __future__ import annotations

import uuid
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from erpdesk.schemas.common import SortField, SortOrder, StockStatus
from erpdesk.schemas.stock import StockQueryParams, StockSummaryQueryParams
from erpdesk.services.stock_utils import STOCK_CONSTANTS

ALL = "all"

# Dashboard column keys are camelCase; the API also takes snake_case names.
SORT_FIELD_ALIASES: dict[str, SortField] = {
    "name": SortField.NAME,
    "productName": SortField.NAME,
    "sku": SortField.SKU,
    "category": SortField.CATEGORY,
    "categoryName": SortField.CATEGORY,
    "warehouse": SortField.WAREHOUSE,
    "warehouseName": SortField.WAREHOUSE,
    "availableStock": SortField.AVAILABLE_STOCK,
    "totalValue": SortField.TOTAL_VALUE,
    "updatedAt": SortField.UPDATED_AT,
}


def resolve_sort_field(name: str | SortField) -> SortField:
    """Map a sort key from the dashboard (``availableStock``) or API (``available_stock``)."""
    if isinstance(name, SortField):
        return name
    if name in SORT_FIELD_ALIASES:
        return SORT_FIELD_ALIASES[name]
    try:
        return SortField(name)
    except ValueError:
        raise ValueError(f"Unknown sort field: {name!r}") from None


def _optional_uuid(value: str) -> uuid.UUID | None:
    if not value or value == ALL:
        return None
    return uuid.UUID(value)


class StockFilters(BaseModel):
    """Filter, sort and page state of the stock list.

    Instances are immutable; every ``update_*`` returns a new value. Changing
    anything but the page sends the user back to page 1.
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    warehouse_id: str = ALL
    category_id: str = ALL
    status: StockStatus | Literal["all"] = ALL
    sort_by: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC
    page: int = Field(default=1, ge=1)
    limit: int = Field(
        default=STOCK_CONSTANTS.DEFAULT_PAGE_SIZE,
        ge=1,
        le=STOCK_CONSTANTS.MAX_PAGE_SIZE,
    )

    def _with(self, **changes: Any) -> StockFilters:
        changes.setdefault("page", 1)
        return self.model_copy(update=changes)

    def update_search(self, search: str) -> StockFilters:
        return self._with(search=search)

    def update_warehouse(self, warehouse_id: str | uuid.UUID) -> StockFilters:
        return self._with(warehouse_id=str(warehouse_id))

    def update_category(self, category_id: str | uuid.UUID) -> StockFilters:
        return self._with(category_id=str(category_id))

    def update_status(self, status: StockStatus | str) -> StockFilters:
        return self._with(status=ALL if status == ALL else StockStatus(status))

    def update_sort(self, sort_by: SortField | str) -> StockFilters:
        field = resolve_sort_field(sort_by)
        if field == self.sort_by and self.sort_order == SortOrder.ASC:
            order = SortOrder.DESC
        else:
            order = SortOrder.ASC
        return self._with(sort_by=field, sort_order=order)

    def update_page(self, page: int) -> StockFilters:
        return self.model_copy(update={"page": max(1, page)})

    def reset(self) -> StockFilters:
        return StockFilters(limit=self.limit)

    def to_query_params(self) -> StockQueryParams:
        return StockQueryParams(
            search=self.search.strip() or None,
            warehouse_id=_optional_uuid(self.warehouse_id),
            category_id=_optional_uuid(self.category_id),
            status=None if self.status == ALL else StockStatus(self.status),
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            page=self.page,
            limit=self.limit,
        )

    def to_summary_params(self) -> StockSummaryQueryParams:
        return StockSummaryQueryParams(warehouse_id=_optional_uuid(self.warehouse_id))

    def to_url_params(self) -> dict[str, str | int]:
        """Query-string values for links; "all" filters and an empty search are left out."""
        params: dict[str, str | int] = {}
        if self.search:
            params["search"] = self.search
        if self.warehouse_id != ALL:
            params["warehouse_id"] = self.warehouse_id
        if self.category_id != ALL:
            params["category_id"] = self.category_id
        if self.status != ALL:
            params["status"] = str(self.status)
        params["sort_by"] = self.sort_by.value
        params["sort_order"] = self.sort_order.value
        params["page"] = self.page
        params["limit"] = self.limit
        return params

