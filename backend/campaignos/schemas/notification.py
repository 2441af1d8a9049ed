from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from campaignos.models import NotificationType, RelatedType


class NotificationRead(BaseModel):
    id: UUID
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    related_type: RelatedType | None
    related_id: UUID | None
    is_read: bool
    created_at: datetime
    read_at: datetime | None

    model_config = {"from_attributes": True}


class NotificationUpdate(BaseModel):
    is_read: bool
