from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class StockStatus(StrEnum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class SortField(StrEnum):
    NAME = "name"
    SKU = "sku"
    CATEGORY = "category"
    WAREHOUSE = "warehouse"
    AVAILABLE_STOCK = "available_stock"
    TOTAL_VALUE = "total_value"
    UPDATED_AT = "updated_at"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class MovementType(StrEnum):
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"


class UUIDModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID


class TimestampModel(BaseModel):
    created_at: datetime
    updated_at: datetime | None = None


class PaginatedResponse[T](BaseModel):
    items: list[T]
    total: int
    page: int
    page_size: int
    pages: int
    has_next: bool = False
    has_prev: bool = False


class ErrorResponse(BaseModel):
    detail: str
    error_code: str | None = None
