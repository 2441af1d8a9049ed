from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .calendar_permission import AccessType


class CampaignPermission(SQLModel, table=True):
    """Grant on a single campaign, independent of calendar-level grants."""

    __tablename__ = "campaign_permissions"
    __table_args__ = (
        UniqueConstraint("campaign_id", "user_id", name="uq_campaign_permissions_campaign_user"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    campaign_id: UUID = Field(
        foreign_key="campaigns.id", ondelete="CASCADE", nullable=False, index=True
    )
    user_id: UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True
    )
    access_type: AccessType = Field(default=AccessType.VIEW)
    invited_by: Optional[UUID] = Field(default=None, foreign_key="users.id", nullable=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()
