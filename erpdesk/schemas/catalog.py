from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field

from .common import UUIDModel


class WarehouseRead(UUIDModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    location: str | None = None
    is_active: bool


class CategoryRead(UUIDModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str | None = None
    parent_id: uuid.UUID | None = None
    is_active: bool


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    parent_id: uuid.UUID | None = None
    is_active: bool = True
