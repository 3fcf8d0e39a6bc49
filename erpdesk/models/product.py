from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erpdesk.models.base import Base, TeamScopedMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from erpdesk.models.category import Category


class Product(UUIDMixin, TimestampMixin, TeamScopedMixin, Base):
    """A sellable item. SKUs are unique per team."""

    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("team_id", "sku"),)

    sku: Mapped[str] = mapped_column(String, index=True)
    name: Mapped[str] = mapped_column(String)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    barcode: Mapped[str | None] = mapped_column(String, default=None)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), index=True, default=None
    )
    unit: Mapped[str] = mapped_column(String, default="pcs")
    unit_price: Mapped[float] = mapped_column(Numeric(14, 2), default=0)
    cost_price: Mapped[float] = mapped_column(Numeric(14, 2), default=0)
    min_stock_level: Mapped[int] = mapped_column(Integer, default=0)
    max_stock_level: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    category: Mapped[Category | None] = relationship()

    def __str__(self) -> str:
        return f"{self.sku} {self.name}"
