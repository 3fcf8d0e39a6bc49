import uuid
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from conftest import PRODUCT_ID, TEAM_ID, WAREHOUSE_ID
from erpdesk.models import StockLevel, StockMovement

BASE = f"/api/v1/teams/{TEAM_ID}/inventory"


def _movement_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "product_id": str(PRODUCT_ID),
        "warehouse_id": str(WAREHOUSE_ID),
        "type": "out",
        "quantity": 4,
        "reason": "Sales order SO-1001",
    }
    body.update(overrides)
    return body


async def _refresh(obj: StockMovement) -> None:
    obj.id = uuid.uuid4()
    obj.created_at = datetime.now(UTC)


@pytest.mark.asyncio
async def test_create_movement(
    client: AsyncClient, mock_db: AsyncMock, mock_cache: AsyncMock
) -> None:
    level = StockLevel(
        team_id=TEAM_ID, product_id=PRODUCT_ID, warehouse_id=WAREHOUSE_ID, quantity=10, reserved_quantity=0
    )
    mock_db.scalar.side_effect = [PRODUCT_ID, WAREHOUSE_ID, level]
    mock_db.refresh.side_effect = _refresh

    response = await client.post(f"{BASE}/movements", json=_movement_body())

    assert response.status_code == 201
    data = response.json()
    assert data["movement_type"] == "out"
    assert data["quantity"] == -4
    assert level.quantity == 6
    mock_db.commit.assert_awaited_once()
    mock_cache.invalidate_team.assert_awaited_once_with(TEAM_ID)


@pytest.mark.asyncio
async def test_create_movement_insufficient_stock(
    client: AsyncClient, mock_db: AsyncMock, mock_cache: AsyncMock
) -> None:
    level = StockLevel(
        team_id=TEAM_ID, product_id=PRODUCT_ID, warehouse_id=WAREHOUSE_ID, quantity=2, reserved_quantity=0
    )
    mock_db.scalar.side_effect = [PRODUCT_ID, WAREHOUSE_ID, level]

    response = await client.post(f"{BASE}/movements", json=_movement_body(quantity=5))

    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock quantity"
    assert level.quantity == 2
    mock_db.add.assert_not_called()
    mock_db.commit.assert_not_called()
    mock_cache.invalidate_team.assert_not_called()


@pytest.mark.asyncio
async def test_create_movement_unknown_product(
    client: AsyncClient, mock_db: AsyncMock, mock_cache: AsyncMock
) -> None:
    mock_db.scalar.return_value = None

    response = await client.post(f"{BASE}/movements", json=_movement_body(type="in"))

    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"
    mock_cache.invalidate_team.assert_not_called()


@pytest.mark.asyncio
async def test_create_movement_unknown_warehouse(
    client: AsyncClient, mock_db: AsyncMock, mock_cache: AsyncMock
) -> None:
    mock_db.scalar.side_effect = [PRODUCT_ID, None]

    response = await client.post(f"{BASE}/movements", json=_movement_body(type="in"))

    assert response.status_code == 404
    assert response.json()["detail"] == "Warehouse not found"


@pytest.mark.asyncio
async def test_create_movement_requires_reason(
    client: AsyncClient, mock_db: AsyncMock, mock_cache: AsyncMock
) -> None:
    response = await client.post(f"{BASE}/movements", json=_movement_body(reason=""))

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_product_movements(client: AsyncClient, mock_db: AsyncMock) -> None:
    movement = StockMovement(
        id=uuid.uuid4(),
        team_id=TEAM_ID,
        product_id=PRODUCT_ID,
        warehouse_id=WAREHOUSE_ID,
        movement_type="in",
        quantity=25,
        reason="Purchase order PO-77",
        created_at=datetime(2026, 10, 1, tzinfo=UTC),
    )
    mock_db.scalar.return_value = 1
    result = MagicMock()
    result.scalars.return_value.all.return_value = [movement]
    mock_db.execute.return_value = result

    response = await client.get(f"{BASE}/products/{PRODUCT_ID}/movements")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["page_size"] == 20
    assert data["items"][0]["quantity"] == 25
    assert data["items"][0]["reason"] == "Purchase order PO-77"
