from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from campaignos.models import ActivityStatus, Currency, Region


class Attachment(BaseModel):
    id: str
    name: str
    type: str
    url: str


class ActivityBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    calendar_id: UUID
    swimlane_id: UUID
    campaign_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    start_date: date
    end_date: date
    status: ActivityStatus = ActivityStatus.CONSIDERING
    description: str = ""
    tags: str = ""
    cost: Decimal = Decimal("0")
    currency: Currency = Currency.USD
    expected_saos: float = 0
    actual_saos: float = 0
    region: Region = Region.US
    dependencies: List[str] = []
    attachments: List[Attachment] = []
    color: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def check_end_after_start(cls, end_date: date, info: ValidationInfo) -> date:
        start_date: date | None = info.data.get("start_date")
        if start_date and end_date < start_date:
            raise ValueError("Start date cannot be after end date")
        return end_date


class ActivityCreate(ActivityBase):
    pass


class ActivityUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    swimlane_id: Optional[UUID] = None
    campaign_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ActivityStatus] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    cost: Optional[Decimal] = None
    currency: Optional[Currency] = None
    expected_saos: Optional[float] = None
    actual_saos: Optional[float] = None
    region: Optional[Region] = None
    dependencies: Optional[List[str]] = None
    attachments: Optional[List[Attachment]] = None
    color: Optional[str] = None


class ActivityRead(ActivityBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActivitySnapshot(BaseModel):
    """Full copy of an activity row, as stored in ``previous_state``."""

    id: UUID
    title: str
    calendar_id: UUID
    swimlane_id: UUID
    campaign_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    start_date: date
    end_date: date
    status: ActivityStatus
    description: str = ""
    tags: str = ""
    cost: Decimal = Decimal("0")
    currency: Currency = Currency.USD
    expected_saos: float = 0
    actual_saos: float = 0
    region: Region = Region.US
    dependencies: List[str] = []
    attachments: List[dict] = []
    color: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("cost")
    @classmethod
    def normalize_cost(cls, cost: Decimal) -> Decimal:
        return Decimal(cost).quantize(Decimal("0.01"))


class BulkActivityOperation(BaseModel):
    operation: Literal[
        "delete", "changeStatus", "changeSwimlane", "changeCampaign", "changeRegion"
    ]
    activity_ids: List[UUID] = Field(min_length=1)
    target_value: Optional[str] = None


class BulkActivityResult(BaseModel):
    message: str
    activity_ids: List[UUID]
