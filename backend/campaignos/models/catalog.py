from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class ActivityType(SQLModel, table=True):
    """Global kind of activity (Webinar, Trade Show, ...)."""

    __tablename__ = "activity_types"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=255, unique=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)


class Vendor(SQLModel, table=True):
    """External partner an activity is bought from; shared by all calendars."""

    __tablename__ = "vendors"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=255, unique=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
