from __future__ import annotations

from fastapi import APIRouter

from erpdesk.api.v1 import health, inventory, movements, products

TEAM_INVENTORY = "/teams/{team_id}/inventory"

api_v1_router = APIRouter()

api_v1_router.include_router(health.router, tags=["Health"])
api_v1_router.include_router(inventory.router, prefix=TEAM_INVENTORY, tags=["Inventory"])
api_v1_router.include_router(products.router, prefix=TEAM_INVENTORY, tags=["Products"])
api_v1_router.include_router(movements.router, prefix=TEAM_INVENTORY, tags=["Stock Movements"])
