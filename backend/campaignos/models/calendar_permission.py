from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class AccessType(str, Enum):
    """Granularity of a sharing grant. ``copy`` reads like ``view``."""

    VIEW = "view"
    EDIT = "edit"
    COPY = "copy"


class CalendarPermission(SQLModel, table=True):
    """Grant of access on one calendar to one non-owner user."""

    __tablename__ = "calendar_permissions"
    __table_args__ = (
        UniqueConstraint("calendar_id", "user_id", name="uq_calendar_permissions_calendar_user"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    calendar_id: UUID = Field(
        foreign_key="calendars.id", ondelete="CASCADE", nullable=False, index=True
    )
    user_id: UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True
    )
    access_type: AccessType = Field(default=AccessType.VIEW)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()
