from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from campaignos.models import HistoryAction
from campaignos.schemas.activity import ActivityRead


class HistoryEntryRead(BaseModel):
    id: UUID
    activity_id: UUID
    user_id: UUID
    user_name: Optional[str] = None
    action: HistoryAction
    sequence: int
    changes: Optional[Dict[str, Any]] = None
    previous_state: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UndoRequest(BaseModel):
    history_id: UUID


class UndoResult(BaseModel):
    activity: ActivityRead
    message: str
