from __future__ import annotations

from .catalog import CategoryCreate, CategoryRead, WarehouseRead
from .common import (
    ErrorResponse,
    MovementType,
    PaginatedResponse,
    SortField,
    SortOrder,
    StockStatus,
    TimestampModel,
    UUIDModel,
)
from .health import DependencyHealth, HealthCheckResponse
from .movement import StockMovementCreate, StockMovementRead
from .product import (
    LowStockProduct,
    ProductCreate,
    ProductDetail,
    ProductRead,
    ProductUpdate,
    ProductWarehouseStock,
)
from .report import MonthlyInventoryValue
from .stock import (
    StockListItem,
    StockListSummary,
    StockQueryParams,
    StockSummaryQueryParams,
)

__all__ = [
    # common
    "ErrorResponse",
    "MovementType",
    "PaginatedResponse",
    "SortField",
    "SortOrder",
    "StockStatus",
    "TimestampModel",
    "UUIDModel",
    # health
    "DependencyHealth",
    "HealthCheckResponse",
    # catalog
    "CategoryCreate",
    "CategoryRead",
    "WarehouseRead",
    # stock
    "StockListItem",
    "StockListSummary",
    "StockQueryParams",
    "StockSummaryQueryParams",
    # product
    "LowStockProduct",
    "ProductCreate",
    "ProductDetail",
    "ProductRead",
    "ProductUpdate",
    "ProductWarehouseStock",
    # movement
    "StockMovementCreate",
    "StockMovementRead",
    # report
    "MonthlyInventoryValue",
]
