from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from erpdesk.models import Product, StockMovement
from erpdesk.schemas import MonthlyInventoryValue

_MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_movement_value = StockMovement.quantity * Product.unit_price


def _team_movements(team_id: uuid.UUID, *columns: Any) -> Select[Any]:
    return (
        select(*columns)
        .select_from(StockMovement)
        .join(Product, Product.id == StockMovement.product_id)
        .where(StockMovement.team_id == team_id)
        .where(Product.is_active.is_(True))
    )


def month_window(today: date, months: int) -> list[tuple[int, int]]:
    """The ``months`` calendar months ending with ``today``'s, oldest first."""
    if months < 1:
        raise ValueError("months must be at least 1")
    index = today.year * 12 + today.month - 1
    return [divmod(i, 12) for i in range(index - months + 1, index + 1)]


def build_monthly_series(
    opening_value: Decimal | float,
    deltas: Mapping[tuple[int, int], Decimal | float],
    months: int,
    today: date,
) -> list[MonthlyInventoryValue]:
    """Cumulative month-end inventory value.

    ``deltas`` maps ``(year, month)`` to the value change booked that month;
    months without movements carry the previous balance forward.
    """
    running = Decimal(str(opening_value))
    series = []
    for year, month0 in month_window(today, months):
        running += Decimal(str(deltas.get((year, month0 + 1), 0)))
        series.append(
            MonthlyInventoryValue(
                month=f"{_MONTH_NAMES[month0]} {year}",
                year=year,
                month_number=month0 + 1,
                value=float(round(running, 2)),
            )
        )
    return series


async def get_monthly_inventory_value(
    db: AsyncSession,
    team_id: uuid.UUID,
    months: int = 12,
    today: date | None = None,
) -> list[MonthlyInventoryValue]:
    """Month-end stock value for the trailing ``months``, priced at current unit prices.

    Only active products count, as in the stock summary.
    """
    today = today or datetime.now(UTC).date()
    first_year, first_month0 = month_window(today, months)[0]
    window_start = datetime(first_year, first_month0 + 1, 1)

    opening = await db.scalar(
        _team_movements(team_id, func.coalesce(func.sum(_movement_value), 0)).where(
            StockMovement.created_at < window_start
        )
    )

    bucket = func.date_trunc("month", StockMovement.created_at).label("bucket")
    result = await db.execute(
        _team_movements(team_id, bucket, func.sum(_movement_value).label("delta"))
        .where(StockMovement.created_at >= window_start)
        .group_by(bucket)
    )
    deltas = {(row.bucket.year, row.bucket.month): row.delta or 0 for row in result.all()}

    return build_monthly_series(opening or 0, deltas, months, today)
