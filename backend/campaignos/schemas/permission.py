from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr

from campaignos.models import AccessType


class CalendarPermissionCreate(BaseModel):
    calendar_id: UUID
    email: EmailStr
    access_type: AccessType = AccessType.VIEW


class PermissionUpdate(BaseModel):
    access_type: AccessType


class CalendarPermissionRead(BaseModel):
    id: UUID
    calendar_id: UUID
    user_id: UUID
    access_type: AccessType
    created_at: datetime
    updated_at: datetime
    # User info (populated by the API)
    user_email: Optional[str] = None
    user_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CampaignPermissionCreate(BaseModel):
    campaign_id: UUID
    email: EmailStr
    access_type: AccessType = AccessType.VIEW


class CampaignPermissionRead(BaseModel):
    id: UUID
    campaign_id: UUID
    user_id: UUID
    access_type: AccessType
    invited_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    user_email: Optional[str] = None
    user_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
