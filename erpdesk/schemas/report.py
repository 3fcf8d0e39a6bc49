from __future__ import annotations

from pydantic import BaseModel


class MonthlyInventoryValue(BaseModel):
    month: str  # "Jan 2026"
    year: int
    month_number: int
    value: float
