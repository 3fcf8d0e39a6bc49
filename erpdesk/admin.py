"""SQLAdmin back office for the ERP tables."""
from __future__ import annotations

import hmac

from fastapi import FastAPI
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.requests import Request

from erpdesk.core.config import settings
from erpdesk.models import Category, Product, StockLevel, StockMovement, Team, Warehouse


class AdminAuth(AuthenticationBackend):
    """Single-account session login from ``admin_username`` / ``admin_password``."""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = str(form.get("username", ""))
        password = str(form.get("password", ""))

        valid = hmac.compare_digest(
            username.encode(), settings.admin_username.encode()
        ) and hmac.compare_digest(password.encode(), settings.admin_password.encode())
        if valid:
            request.session.update({"admin": username})
        return valid

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return request.session.get("admin") == settings.admin_username


class TeamAdmin(ModelView, model=Team):
    column_list = [Team.name, Team.slug, Team.is_active, Team.created_at]
    column_searchable_list = [Team.name, Team.slug]
    icon = "fa-solid fa-people-group"


class WarehouseAdmin(ModelView, model=Warehouse):
    column_list = [Warehouse.name, Warehouse.location, Warehouse.team_id, Warehouse.is_active]
    column_searchable_list = [Warehouse.name, Warehouse.location]
    column_sortable_list = [Warehouse.name]
    icon = "fa-solid fa-warehouse"


class CategoryAdmin(ModelView, model=Category):
    name_plural = "Categories"
    column_list = [Category.name, Category.description, Category.team_id, Category.is_active]
    column_searchable_list = [Category.name]
    column_sortable_list = [Category.name]
    icon = "fa-solid fa-tags"


class ProductAdmin(ModelView, model=Product):
    column_list = [
        Product.sku,
        Product.name,
        Product.category,
        Product.unit_price,
        Product.cost_price,
        Product.min_stock_level,
        Product.is_active,
    ]
    column_searchable_list = [Product.sku, Product.name, Product.barcode]
    column_sortable_list = [Product.sku, Product.name, Product.unit_price]
    icon = "fa-solid fa-box"


class StockLevelAdmin(ModelView, model=StockLevel):
    name = "Stock Level"
    column_list = [
        StockLevel.product,
        StockLevel.warehouse,
        StockLevel.quantity,
        StockLevel.reserved_quantity,
        StockLevel.updated_at,
    ]
    column_sortable_list = [StockLevel.quantity, StockLevel.updated_at]
    # On-hand quantity changes only through stock movements; reservations are set here.
    can_create = False
    form_columns = [StockLevel.reserved_quantity]
    icon = "fa-solid fa-cubes"


class StockMovementAdmin(ModelView, model=StockMovement):
    name = "Stock Movement"
    column_list = [
        StockMovement.created_at,
        StockMovement.product_id,
        StockMovement.warehouse_id,
        StockMovement.movement_type,
        StockMovement.quantity,
        StockMovement.reason,
        StockMovement.reference,
    ]
    column_sortable_list = [StockMovement.created_at]
    column_default_sort = (StockMovement.created_at, True)
    can_create = False
    can_edit = False
    can_delete = False
    icon = "fa-solid fa-right-left"


ADMIN_VIEWS: list[type[ModelView]] = [
    TeamAdmin,
    WarehouseAdmin,
    CategoryAdmin,
    ProductAdmin,
    StockLevelAdmin,
    StockMovementAdmin,
]


def mount_admin(app: FastAPI, engine: AsyncEngine) -> Admin:
    admin = Admin(
        app,
        engine,
        title="erpdesk Admin",
        authentication_backend=AdminAuth(secret_key=settings.app_secret_key),
    )
    for view in ADMIN_VIEWS:
        admin.add_view(view)
    return admin
