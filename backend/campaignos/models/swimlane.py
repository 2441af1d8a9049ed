from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Swimlane(SQLModel, table=True):
    """Lane within a calendar; carries no permissions of its own."""

    __tablename__ = "swimlanes"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=255)
    budget: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    calendar_id: UUID = Field(
        foreign_key="calendars.id", ondelete="CASCADE", nullable=False, index=True
    )
    sort_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
