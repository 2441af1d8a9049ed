from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import select

from campaignos.api.deps import get_principal
from campaignos.core.config import settings
from campaignos.db import SessionDep
from campaignos.models import User
from campaignos.schemas import ActivityRead, HistoryEntryRead, UndoRequest, UndoResult
from campaignos.services.history import history_calendar_id, list_history
from campaignos.services.permissions import Action, Principal, ResourceKind, require_access
from campaignos.services.undo import undo_history_entry

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/", response_model=List[HistoryEntryRead], summary="List activity history")
def list_activity_history(
    session: SessionDep,
    activity_id: UUID = Query(...),
    limit: Optional[int] = Query(default=None, ge=1, le=settings.HISTORY_MAX_LIMIT),
    principal: Principal = Depends(get_principal),
) -> List[HistoryEntryRead]:
    """Newest first. Works for deleted activities through their last snapshot."""
    calendar_id = history_calendar_id(session, activity_id)
    if calendar_id is None:
        if not principal.is_elevated:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    else:
        require_access(session, principal, Action.VIEW, ResourceKind.CALENDAR, calendar_id)

    entries = list_history(session, activity_id, limit=limit or settings.HISTORY_DEFAULT_LIMIT)
    user_ids = {entry.user_id for entry in entries}
    names = {}
    if user_ids:
        names = {
            user.id: user.name
            for user in session.exec(select(User).where(User.id.in_(user_ids))).all()
        }

    result = []
    for entry in entries:
        data = HistoryEntryRead.model_validate(entry)
        data.user_name = names.get(entry.user_id)
        result.append(data)
    return result


@router.post("/undo", response_model=UndoResult, summary="Undo a history entry")
def undo(
    payload: UndoRequest,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> UndoResult:
    activity = undo_history_entry(session, principal, payload.history_id)
    session.commit()
    session.refresh(activity)
    return UndoResult(
        activity=ActivityRead.model_validate(activity),
        message="Change undone successfully",
    )
