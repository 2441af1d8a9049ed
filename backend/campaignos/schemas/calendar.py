from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from campaignos.schemas.activity import ActivityRead
from campaignos.schemas.campaign import CampaignRead
from campaignos.schemas.swimlane import SwimlaneRead


class CalendarBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    is_template: bool = False


class CalendarCreate(CalendarBase):
    pass


class CalendarUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    is_template: Optional[bool] = None


class CalendarRead(CalendarBase):
    id: UUID
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CalendarReadWithAccess(CalendarRead):
    # "owner", "edit" or "view" for the current user
    access_level: Optional[str] = None


class CalendarDetail(BaseModel):
    calendar: CalendarReadWithAccess
    swimlanes: list[SwimlaneRead] = []
    campaigns: list[CampaignRead] = []
    activities: list[ActivityRead] = []
