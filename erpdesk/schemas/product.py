from __future__ import annotations

import uuid
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import TimestampModel, UUIDModel


class ProductBase(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    barcode: str | None = None
    category_id: uuid.UUID | None = None
    unit: str = Field(default="pcs", min_length=1)
    unit_price: float = Field(default=0, ge=0)
    cost_price: float = Field(default=0, ge=0)
    min_stock_level: int = Field(default=0, ge=0)
    max_stock_level: int = Field(default=0, ge=0)
    is_active: bool = True


class ProductCreate(ProductBase):
    # Opening stock is booked as an "in" movement into ``warehouse_id``.
    initial_stock: int = Field(default=0, ge=0)
    warehouse_id: uuid.UUID | None = None

    @model_validator(mode="after")
    def require_warehouse_for_initial_stock(self) -> Self:
        if self.initial_stock > 0 and self.warehouse_id is None:
            raise ValueError("warehouse_id is required when initial_stock is set")
        return self


class ProductUpdate(BaseModel):
    """Partial update; only fields present in the request are written."""

    sku: str | None = Field(default=None, min_length=1, max_length=64)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    barcode: str | None = None
    category_id: uuid.UUID | None = None
    unit: str | None = Field(default=None, min_length=1)
    unit_price: float | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)
    min_stock_level: int | None = Field(default=None, ge=0)
    max_stock_level: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class ProductRead(UUIDModel, TimestampModel):
    model_config = ConfigDict(from_attributes=True)

    sku: str
    name: str
    description: str | None = None
    barcode: str | None = None
    category_id: uuid.UUID | None = None
    unit: str
    unit_price: float
    cost_price: float
    min_stock_level: int
    max_stock_level: int
    is_active: bool


class ProductWarehouseStock(BaseModel):
    warehouse_id: uuid.UUID
    warehouse_name: str
    quantity: int
    reserved_quantity: int
    available_stock: int


class ProductDetail(ProductRead):
    category_name: str | None = None
    total_available: int = 0
    stock: list[ProductWarehouseStock] = []


class LowStockProduct(BaseModel):
    id: uuid.UUID
    sku: str
    name: str
    category_name: str | None = None
    available_stock: int
    min_stock_level: int
