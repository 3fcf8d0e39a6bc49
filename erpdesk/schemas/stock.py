from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import SortField, SortOrder, StockStatus


class StockListItem(BaseModel):
    """One product in one warehouse, as shown on the stock list."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    warehouse_id: uuid.UUID
    product_name: str
    sku: str
    category_name: str | None = None
    warehouse_name: str
    warehouse_location: str | None = None
    stock_quantity: int
    reserved_quantity: int
    available_stock: int
    min_stock_level: int
    max_stock_level: int
    unit_price: float
    cost_price: float
    total_value: float
    status: StockStatus
    updated_at: datetime


class StockListSummary(BaseModel):
    total_items: int = 0
    total_value: float = 0.0
    low_stock_items: int = 0
    out_of_stock_items: int = 0
    in_stock_items: int = 0


class StockQueryParams(BaseModel):
    search: str | None = None
    warehouse_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    status: StockStatus | None = None
    sort_by: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class StockSummaryQueryParams(BaseModel):
    warehouse_id: uuid.UUID | None = None
