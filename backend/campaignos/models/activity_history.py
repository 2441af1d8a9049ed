from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


class HistoryAction(str, Enum):
    """Kinds of activity mutations kept in the audit log."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ActivityHistory(SQLModel, table=True):
    """Append-only audit entry for one activity mutation.

    ``activity_id`` is not a foreign key: entries outlive the activity so a
    deletion can be undone.
    """

    __tablename__ = "activity_history"
    __table_args__ = (
        UniqueConstraint("activity_id", "sequence", name="uq_activity_history_sequence"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    activity_id: UUID = Field(nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)  # actor
    action: HistoryAction = Field(index=True)
    sequence: int = Field(nullable=False)
    changes: Optional[dict] = Field(default=None, sa_column=Column(JSON(none_as_null=True), nullable=True))
    previous_state: Optional[dict] = Field(
        default=None, sa_column=Column(JSON(none_as_null=True), nullable=True)
    )
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False, index=True)
