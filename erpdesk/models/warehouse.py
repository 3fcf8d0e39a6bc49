from __future__ import annotations

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from erpdesk.models.base import Base, TeamScopedMixin, TimestampMixin, UUIDMixin


class Warehouse(UUIDMixin, TimestampMixin, TeamScopedMixin, Base):
    __tablename__ = "warehouses"
    __table_args__ = (UniqueConstraint("team_id", "name"),)

    name: Mapped[str] = mapped_column(String)
    location: Mapped[str | None] = mapped_column(String, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __str__(self) -> str:
        return self.name
