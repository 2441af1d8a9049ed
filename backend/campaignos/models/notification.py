from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class NotificationType(str, Enum):
    CALENDAR_INVITE = "calendar_invite"
    CAMPAIGN_INVITE = "campaign_invite"
    COMMENT_ADDED = "comment_added"
    PERMISSION_CHANGED = "permission_changed"


class RelatedType(str, Enum):
    CALENDAR = "calendar"
    CAMPAIGN = "campaign"
    ACTIVITY = "activity"
    COMMENT = "comment"


class Notification(SQLModel, table=True):
    """User notification."""

    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    user_id: UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True
    )
    type: NotificationType = Field(index=True)
    title: str = Field(max_length=255)
    message: str = Field(max_length=1000)
    related_type: Optional[RelatedType] = Field(default=None, nullable=True)
    related_id: Optional[UUID] = Field(default=None, nullable=True)
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False, index=True)
    read_at: Optional[datetime] = Field(default=None, nullable=True)
