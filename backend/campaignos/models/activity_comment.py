from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class ActivityComment(SQLModel, table=True):
    """Discussion comment attached to an activity."""

    __tablename__ = "activity_comments"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    activity_id: UUID = Field(
        foreign_key="activities.id", ondelete="CASCADE", nullable=False, index=True
    )
    user_id: UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True
    )
    content: str = Field(max_length=5000)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()
