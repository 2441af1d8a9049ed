from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import select

from campaignos.api.deps import get_principal
from campaignos.db import SessionDep
from campaignos.models import Activity, Calendar
from campaignos.schemas import (
    ActivityCreate,
    ActivityRead,
    ActivityUpdate,
    BulkActivityOperation,
    BulkActivityResult,
)
from campaignos.services import activities as activity_service
from campaignos.services.permissions import Action, Principal, ResourceKind, require_access

router = APIRouter()


@router.get("/", response_model=List[ActivityRead], summary="List activities of a calendar")
def list_activities(
    session: SessionDep,
    calendar_id: UUID = Query(...),
    principal: Principal = Depends(get_principal),
) -> List[Activity]:
    if not session.get(Calendar, calendar_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar not found")
    require_access(session, principal, Action.VIEW, ResourceKind.CALENDAR, calendar_id)
    statement = (
        select(Activity)
        .where(Activity.calendar_id == calendar_id)
        .order_by(Activity.start_date, Activity.created_at)
    )
    return list(session.exec(statement).all())


@router.post(
    "/",
    response_model=ActivityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create activity",
)
def create_activity(
    payload: ActivityCreate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Activity:
    activity = activity_service.create_activity(session, principal, payload)
    session.commit()
    session.refresh(activity)
    return activity


@router.post("/bulk", response_model=BulkActivityResult, summary="Bulk update activities")
def bulk_update_activities(
    payload: BulkActivityOperation,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> BulkActivityResult:
    message, activity_ids = activity_service.bulk_update_activities(session, principal, payload)
    session.commit()
    return BulkActivityResult(message=message, activity_ids=activity_ids)


@router.get("/{activity_id}", response_model=ActivityRead, summary="Get activity")
def get_activity(
    activity_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Activity:
    activity = activity_service.get_activity(session, activity_id)
    require_access(session, principal, Action.VIEW, ResourceKind.ACTIVITY, activity_id)
    return activity


@router.put("/{activity_id}", response_model=ActivityRead, summary="Update activity")
def update_activity(
    activity_id: UUID,
    payload: ActivityUpdate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Activity:
    activity = activity_service.update_activity(session, principal, activity_id, payload)
    session.commit()
    session.refresh(activity)
    return activity


@router.delete(
    "/{activity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete activity",
)
def delete_activity(
    activity_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> None:
    activity_service.delete_activity(session, principal, activity_id)
    session.commit()
