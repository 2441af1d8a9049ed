from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CampaignBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class CampaignCreate(CampaignBase):
    calendar_id: UUID


class CampaignUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)


class CampaignRead(CampaignBase):
    id: UUID
    calendar_id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
