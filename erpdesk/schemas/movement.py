from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import MovementType, UUIDModel


class StockMovementCreate(BaseModel):
    product_id: uuid.UUID
    warehouse_id: uuid.UUID
    type: MovementType
    # For "adjustment" this is the new absolute quantity; otherwise the amount moved.
    quantity: int
    reason: str = Field(min_length=1)
    reference: str | None = None
    notes: str | None = None


class StockMovementRead(UUIDModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: uuid.UUID
    warehouse_id: uuid.UUID
    movement_type: MovementType
    quantity: int
    reason: str
    reference: str | None = None
    notes: str | None = None
    created_at: datetime
