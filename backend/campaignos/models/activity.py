from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class ActivityStatus(str, Enum):
    """Pipeline stage of an activity."""

    CONSIDERING = "Considering"
    NEGOTIATING = "Negotiating"
    COMMITTED = "Committed"


class Currency(str, Enum):
    USD = "US$"
    GBP = "UK£"
    EUR = "EUR"


class Region(str, Enum):
    US = "US"
    EMEA = "EMEA"
    ROW = "ROW"


class Activity(SQLModel, table=True):
    """Scheduled marketing task placed in a swimlane of a calendar."""

    __tablename__ = "activities"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    title: str = Field(max_length=255)
    calendar_id: UUID = Field(
        foreign_key="calendars.id", ondelete="CASCADE", nullable=False, index=True
    )
    swimlane_id: UUID = Field(
        foreign_key="swimlanes.id", ondelete="CASCADE", nullable=False, index=True
    )
    campaign_id: Optional[UUID] = Field(
        default=None,
        foreign_key="campaigns.id",
        ondelete="SET NULL",
        nullable=True,
        index=True,
    )
    type_id: Optional[UUID] = Field(
        default=None, foreign_key="activity_types.id", ondelete="SET NULL", nullable=True
    )
    vendor_id: Optional[UUID] = Field(
        default=None, foreign_key="vendors.id", ondelete="SET NULL", nullable=True
    )
    start_date: date = Field(nullable=False, index=True)
    end_date: date = Field(nullable=False, index=True)
    status: ActivityStatus = Field(default=ActivityStatus.CONSIDERING)
    description: str = Field(default="", max_length=5000)
    tags: str = Field(default="", max_length=1000)  # comma-separated
    cost: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    currency: Currency = Field(default=Currency.USD)
    expected_saos: float = Field(default=0)
    actual_saos: float = Field(default=0)
    region: Region = Field(default=Region.US)
    dependencies: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    attachments: list[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    color: Optional[str] = Field(default=None, max_length=32)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()
