from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CommentBase(BaseModel):
    content: str = Field(max_length=5000, min_length=1)


class CommentCreate(CommentBase):
    activity_id: UUID


class CommentUpdate(BaseModel):
    content: str = Field(max_length=5000, min_length=1)


class CommentRead(CommentBase):
    id: UUID
    activity_id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime
    # User info (populated by the API)
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
