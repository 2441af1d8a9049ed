from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Campaign(SQLModel, table=True):
    """Named grouping of activities within a calendar."""

    __tablename__ = "campaigns"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=255)
    calendar_id: UUID = Field(
        foreign_key="calendars.id", ondelete="CASCADE", nullable=False, index=True
    )
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
