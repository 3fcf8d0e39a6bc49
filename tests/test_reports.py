import uuid
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from erpdesk.services.reports import build_monthly_series, get_monthly_inventory_value, month_window


def test_month_window_crosses_year() -> None:
    assert month_window(date(2026, 2, 14), 4) == [(2025, 10), (2025, 11), (2026, 0), (2026, 1)]


def test_month_window_single_month() -> None:
    assert month_window(date(2026, 10, 18), 1) == [(2026, 9)]


def test_month_window_rejects_empty() -> None:
    with pytest.raises(ValueError):
        month_window(date(2026, 10, 18), 0)


def test_build_monthly_series_is_cumulative() -> None:
    series = build_monthly_series(
        Decimal("1000"),
        {(2026, 8): Decimal("250.50"), (2026, 10): Decimal("-100")},
        months=3,
        today=date(2026, 10, 18),
    )

    assert [m.month for m in series] == ["Aug 2026", "Sep 2026", "Oct 2026"]
    assert [m.value for m in series] == [1250.5, 1250.5, 1150.5]
    assert series[-1].year == 2026
    assert series[-1].month_number == 10


def test_build_monthly_series_without_movements() -> None:
    series = build_monthly_series(0, {}, months=12, today=date(2026, 10, 18))

    assert len(series) == 12
    assert series[0].month == "Nov 2025"
    assert all(m.value == 0 for m in series)


@pytest.mark.asyncio
async def test_get_monthly_inventory_value() -> None:
    db = AsyncMock()
    db.scalar.return_value = Decimal("500")
    result = MagicMock()
    result.all.return_value = [
        SimpleNamespace(bucket=datetime(2026, 9, 1), delta=Decimal("120")),
        SimpleNamespace(bucket=datetime(2026, 10, 1), delta=None),
    ]
    db.execute.return_value = result

    series = await get_monthly_inventory_value(db, uuid.uuid4(), months=2, today=date(2026, 10, 18))

    assert [(m.month, m.value) for m in series] == [("Sep 2026", 620.0), ("Oct 2026", 620.0)]


@pytest.mark.asyncio
async def test_monthly_inventory_value_counts_active_products_only() -> None:
    db = AsyncMock()
    db.scalar.return_value = Decimal("0")
    result = MagicMock()
    result.all.return_value = []
    db.execute.return_value = result

    await get_monthly_inventory_value(db, uuid.uuid4(), months=3, today=date(2026, 10, 18))

    statements = [db.scalar.await_args.args[0], db.execute.await_args.args[0]]
    for stmt in statements:
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "JOIN products ON" in sql
        assert "products.is_active IS true" in sql
