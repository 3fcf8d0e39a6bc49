from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erpdesk.models.base import Base, TeamScopedMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from erpdesk.models.product import Product
    from erpdesk.models.warehouse import Warehouse


class StockLevel(UUIDMixin, TimestampMixin, TeamScopedMixin, Base):
    """On-hand quantity of one product in one warehouse."""

    __tablename__ = "stock_levels"
    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id"),
        CheckConstraint("quantity >= 0", name="ck_stock_levels_quantity_non_negative"),
        CheckConstraint("reserved_quantity >= 0", name="ck_stock_levels_reserved_non_negative"),
        CheckConstraint("reserved_quantity <= quantity", name="ck_stock_levels_reserved_within_quantity"),
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), index=True
    )
    warehouse_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("warehouses.id", ondelete="CASCADE"), index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    reserved_quantity: Mapped[int] = mapped_column(Integer, default=0)

    product: Mapped[Product] = relationship()
    warehouse: Mapped[Warehouse] = relationship()


class StockMovement(UUIDMixin, TimestampMixin, TeamScopedMixin, Base):
    """An immutable ledger entry. ``quantity`` is the signed change it caused."""

    __tablename__ = "stock_movements"

    product_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), index=True
    )
    warehouse_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("warehouses.id", ondelete="CASCADE"), index=True
    )
    movement_type: Mapped[str] = mapped_column(String)  # in | out | adjustment
    quantity: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(String)
    reference: Mapped[str | None] = mapped_column(String, default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
