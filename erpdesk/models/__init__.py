from erpdesk.models.base import Base
from erpdesk.models.category import Category
from erpdesk.models.product import Product
from erpdesk.models.stock import StockLevel, StockMovement
from erpdesk.models.team import Team
from erpdesk.models.warehouse import Warehouse

__all__ = [
    "Base",
    "Category",
    "Product",
    "StockLevel",
    "StockMovement",
    "Team",
    "Warehouse",
]
