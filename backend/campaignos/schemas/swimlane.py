from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SwimlaneBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    budget: Optional[Decimal] = Field(default=None, ge=0)
    sort_order: int = 0


class SwimlaneCreate(SwimlaneBase):
    calendar_id: UUID


class SwimlaneUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    budget: Optional[Decimal] = Field(default=None, ge=0)
    sort_order: Optional[int] = None


class SwimlaneRead(SwimlaneBase):
    id: UUID
    calendar_id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
