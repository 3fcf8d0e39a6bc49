import json
import uuid
from unittest.mock import MagicMock

import pytest

from erpdesk.core.exceptions import ConflictError, InsufficientStockError, NotFoundError
from erpdesk.main import app, erp_error_handler


@pytest.mark.asyncio
async def test_not_found_maps_to_404() -> None:
    request = MagicMock()
    request.url.path = "/api/v1/anything"

    response = await erp_error_handler(request, NotFoundError("Product", uuid.uuid4()))

    assert response.status_code == 404
    assert json.loads(response.body) == {"detail": "Product not found", "error_code": "not_found"}


@pytest.mark.asyncio
async def test_domain_error_maps_to_400() -> None:
    request = MagicMock()
    request.url.path = "/api/v1/anything"

    response = await erp_error_handler(request, InsufficientStockError(current=1, requested=5))

    assert response.status_code == 400
    assert json.loads(response.body)["error_code"] == "insufficient_stock"


@pytest.mark.asyncio
async def test_conflict_maps_to_409() -> None:
    request = MagicMock()
    request.url.path = "/api/v1/anything"

    response = await erp_error_handler(request, ConflictError("Product with this SKU already exists"))

    assert response.status_code == 409
    assert json.loads(response.body) == {
        "detail": "Product with this SKU already exists",
        "error_code": "conflict",
    }


def test_routes_registered() -> None:
    paths = {route.path for route in app.routes}

    assert "/api/v1/health" in paths
    assert "/api/v1/teams/{team_id}/inventory/stock" in paths
    assert "/api/v1/teams/{team_id}/inventory/movements" in paths
    assert "/api/v1/teams/{team_id}/inventory/products" in paths
    assert "/api/v1/teams/{team_id}/inventory/products/low-stock" in paths
    assert "/api/v1/teams/{team_id}/inventory/products/{product_id}" in paths
    assert "/dashboard/teams/{team_id}/inventory/stock-list" in paths
