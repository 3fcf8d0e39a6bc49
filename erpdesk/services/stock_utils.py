"""Pure helpers for the stock list: status, pagination math and formatting.

Monetary and number formatting follows the ``id-ID`` conventions the
dashboard uses (``.`` for thousands, ``,`` for decimals).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from erpdesk.schemas.common import StockStatus

ELLIPSIS = "..."


@dataclass(frozen=True)
class StockConstants:
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    DEBOUNCE_DELAY: int = 300  # ms
    REFRESH_INTERVAL: int = 30_000  # ms


STOCK_CONSTANTS = StockConstants()

_ID_MONTHS = ("Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des")

_STATUS_LABELS = {
    StockStatus.OUT_OF_STOCK: "Stok Habis",
    StockStatus.LOW_STOCK: "Stok Menipis",
    StockStatus.IN_STOCK: "Tersedia",
}


@dataclass(frozen=True)
class PaginationInfo:
    start_item: int
    end_item: int
    total_pages: int
    has_next: bool
    has_prev: bool


def get_stock_status(
    current_stock: int,
    min_level: int,
    max_level: int | None = None,
) -> StockStatus:
    """Classify a stock quantity against its minimum level.

    ``max_level`` is accepted for symmetry with the product record; overstock
    is not a distinct status.
    """
    if current_stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if current_stock <= min_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def get_stock_status_label(status: StockStatus | str) -> str:
    return _STATUS_LABELS.get(StockStatus(status), _STATUS_LABELS[StockStatus.IN_STOCK])


def total_pages_for(total: int, limit: int) -> int:
    if limit <= 0:
        raise ValueError("limit must be positive")
    return math.ceil(total / limit) if total > 0 else 0


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp ``page`` to ``[1, total_pages]``; an empty result set still has page 1."""
    return max(1, min(page, max(total_pages, 1)))


def generate_pagination_info(page: int, limit: int, total: int) -> PaginationInfo:
    """Compute the item window and navigation flags for one page.

    >>> generate_pagination_info(2, 20, 45)
    PaginationInfo(start_item=21, end_item=40, total_pages=3, has_next=True, has_prev=True)
    """
    total_pages = total_pages_for(total, limit)
    start_item = (page - 1) * limit + 1 if total > 0 else 0
    end_item = min(page * limit, total)

    return PaginationInfo(
        start_item=start_item,
        end_item=end_item,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def should_render_pagination(total: int) -> bool:
    return total > 0


def get_visible_pages(current_page: int, total_pages: int, delta: int = 2) -> list[int | str]:
    """Page numbers to show in pagination controls.

    Always includes the first and last page plus ``delta`` pages either side
    of the current one; skipped runs collapse into ``"..."``.
    """
    if total_pages <= 0:
        return []

    window = list(range(max(2, current_page - delta), min(total_pages - 1, current_page + delta) + 1))

    pages: list[int | str] = [1]
    if current_page - delta > 2:
        pages.append(ELLIPSIS)
    pages.extend(window)

    if current_page + delta < total_pages - 1:
        pages.extend([ELLIPSIS, total_pages])
    elif total_pages > 1:
        pages.append(total_pages)

    return pages


def calculate_percentage(value: float, total: float) -> int:
    if total == 0:
        return 0
    return int(Decimal(value * 100 / total).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _group(amount: Decimal | float | int, decimals: int, thousands: str, point: str) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    value = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, frac = f"{abs(value):.{decimals}f}".partition(".")

    groups = []
    while len(whole) > 3:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    groups.insert(0, whole)

    text = thousands.join(groups)
    if decimals:
        text = f"{text}{point}{frac}"
    return sign + text


def format_currency(amount: Decimal | float | int) -> str:
    """Format an amount as Indonesian Rupiah, e.g. ``Rp 1.250.000,00``."""
    text = _group(amount, 2, ".", ",")
    if text.startswith("-"):
        return f"-Rp {text[1:]}"
    return f"Rp {text}"


def format_usd(amount: Decimal | float | int) -> str:
    text = _group(amount, 2, ",", ".")
    if text.startswith("-"):
        return f"-${text[1:]}"
    return f"${text}"


def format_number(num: Decimal | float | int) -> str:
    if isinstance(num, int) or float(num).is_integer():
        return _group(num, 0, ".", ",")
    text = _group(num, 3, ".", ",").rstrip("0")
    return text.rstrip(",")


def format_date(value: date | datetime | str) -> str:
    """``18 Okt 2026``."""
    d = _coerce_datetime(value)
    return f"{d.day} {_ID_MONTHS[d.month - 1]} {d.year}"


def format_datetime(value: datetime | str) -> str:
    """``18 Okt 2026, 14.05``."""
    d = _coerce_datetime(value)
    if not isinstance(d, datetime):
        d = datetime(d.year, d.month, d.day)
    return f"{format_date(d)}, {d.hour:02d}.{d.minute:02d}"


def _coerce_datetime(value: date | datetime | str) -> date | datetime:
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value
