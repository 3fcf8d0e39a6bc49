import uuid
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from erpdesk.core.exceptions import InsufficientStockError, NotFoundError
from erpdesk.models import StockLevel, StockMovement
from erpdesk.schemas import MovementType, StockMovementCreate
from erpdesk.services.movements import apply_movement, record_stock_movement

TEAM_ID = uuid.uuid4()
PRODUCT_ID = uuid.uuid4()
WAREHOUSE_ID = uuid.uuid4()


@pytest.mark.parametrize(
    ("current", "movement_type", "quantity", "expected"),
    [
        (10, MovementType.IN, 5, (15, 5)),
        (10, MovementType.IN, -5, (15, 5)),
        (10, MovementType.OUT, 4, (6, -4)),
        (10, MovementType.OUT, -4, (6, -4)),
        (10, MovementType.OUT, 10, (0, -10)),
        (10, MovementType.ADJUSTMENT, 3, (3, -7)),
        (0, MovementType.ADJUSTMENT, 12, (12, 12)),
    ],
)
def test_apply_movement(
    current: int, movement_type: MovementType, quantity: int, expected: tuple[int, int]
) -> None:
    assert apply_movement(current, movement_type, quantity) == expected


@pytest.mark.parametrize(
    ("movement_type", "quantity"),
    [(MovementType.OUT, 11), (MovementType.ADJUSTMENT, -1)],
)
def test_apply_movement_rejects_negative_stock(movement_type: MovementType, quantity: int) -> None:
    with pytest.raises(InsufficientStockError) as exc_info:
        apply_movement(10, movement_type, quantity)

    assert exc_info.value.current == 10
    assert exc_info.value.requested == quantity


def _db() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()

    async def _refresh(obj: StockMovement) -> None:
        obj.id = uuid.uuid4()
        obj.created_at = datetime.now(UTC)

    db.refresh.side_effect = _refresh
    return db


def _body(movement_type: MovementType, quantity: int) -> StockMovementCreate:
    return StockMovementCreate(
        product_id=PRODUCT_ID,
        warehouse_id=WAREHOUSE_ID,
        type=movement_type,
        quantity=quantity,
        reason="Cycle count",
    )


def _level(quantity: int, reserved: int = 0) -> StockLevel:
    return StockLevel(
        team_id=TEAM_ID,
        product_id=PRODUCT_ID,
        warehouse_id=WAREHOUSE_ID,
        quantity=quantity,
        reserved_quantity=reserved,
    )


def _sql(stmt: Any) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


@pytest.mark.asyncio
async def test_record_movement_creates_row_before_locking() -> None:
    db = _db()
    level = _level(quantity=0)
    scalars = iter([PRODUCT_ID, WAREHOUSE_ID, level])
    calls: list[tuple[str, Any]] = []

    async def _execute(stmt: Any) -> MagicMock:
        calls.append(("execute", stmt))
        return MagicMock()

    async def _scalar(stmt: Any) -> Any:
        calls.append(("scalar", stmt))
        return next(scalars)

    db.execute.side_effect = _execute
    db.scalar.side_effect = _scalar

    movement = await record_stock_movement(db, TEAM_ID, _body(MovementType.IN, 8))

    assert [kind for kind, _ in calls] == ["scalar", "scalar", "execute", "scalar"]
    upsert = _sql(calls[2][1])
    assert upsert.startswith("INSERT INTO stock_levels")
    assert "ON CONFLICT (product_id, warehouse_id) DO NOTHING" in upsert
    assert _sql(calls[3][1]).endswith("FOR UPDATE")

    assert level.quantity == 8
    db.add.assert_called_once_with(movement)
    assert movement.quantity == 8
    assert movement.movement_type == "in"
    db.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_record_adjustment_stores_signed_delta() -> None:
    db = _db()
    level = _level(quantity=20, reserved=2)
    db.scalar.side_effect = [PRODUCT_ID, WAREHOUSE_ID, level]

    movement = await record_stock_movement(db, TEAM_ID, _body(MovementType.ADJUSTMENT, 14))

    assert level.quantity == 14
    assert movement.quantity == -6
    assert movement.reason == "Cycle count"
    db.add.assert_called_once_with(movement)


@pytest.mark.asyncio
async def test_record_movement_unknown_product() -> None:
    db = _db()
    db.scalar.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        await record_stock_movement(db, TEAM_ID, _body(MovementType.IN, 1))

    assert exc_info.value.entity == "Product"
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_record_first_movement_out_is_rejected() -> None:
    db = _db()
    db.scalar.side_effect = [PRODUCT_ID, WAREHOUSE_ID, _level(quantity=0)]

    with pytest.raises(InsufficientStockError):
        await record_stock_movement(db, TEAM_ID, _body(MovementType.OUT, 1))

    db.add.assert_not_called()
    db.flush.assert_not_called()


@pytest.mark.parametrize(
    ("movement_type", "quantity"),
    [(MovementType.OUT, 8), (MovementType.ADJUSTMENT, 2)],
)
def test_apply_movement_keeps_reserved_stock(movement_type: MovementType, quantity: int) -> None:
    with pytest.raises(InsufficientStockError):
        apply_movement(10, movement_type, quantity, reserved=3)

    assert apply_movement(10, MovementType.OUT, 7, reserved=3) == (3, -7)


@pytest.mark.asyncio
async def test_record_movement_cannot_consume_reserved_stock() -> None:
    db = _db()
    level = _level(quantity=10, reserved=4)
    db.scalar.side_effect = [PRODUCT_ID, WAREHOUSE_ID, level]

    with pytest.raises(InsufficientStockError):
        await record_stock_movement(db, TEAM_ID, _body(MovementType.OUT, 7))

    assert level.quantity == 10
    db.add.assert_not_called()
