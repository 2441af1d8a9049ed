from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CatalogEntryBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class CatalogEntryCreate(CatalogEntryBase):
    pass


class CatalogEntryUpdate(CatalogEntryBase):
    pass


class CatalogEntryRead(CatalogEntryBase):
    id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
