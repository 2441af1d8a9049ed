from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select

from campaignos.api.deps import get_principal
from campaignos.core.config import settings
from campaignos.db import SessionDep
from campaignos.models import Activity, Calendar, Campaign, Swimlane
from campaignos.schemas import (
    ActivityRead,
    CalendarCreate,
    CalendarDetail,
    CalendarReadWithAccess,
    CalendarUpdate,
    CampaignRead,
    SwimlaneRead,
)
from campaignos.services.permissions import (
    Action,
    Principal,
    ResourceKind,
    accessible_calendars_condition,
    require_access,
    resolve_access,
)

router = APIRouter()

logger = logging.getLogger(__name__)


def _with_access(calendar: Calendar, level) -> CalendarReadWithAccess:
    data = CalendarReadWithAccess.model_validate(calendar)
    data.access_level = level.name.lower()
    return data


def _get_calendar_or_404(session: SessionDep, calendar_id: UUID) -> Calendar:
    calendar = session.get(Calendar, calendar_id)
    if not calendar:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar not found")
    return calendar


@router.get("/", response_model=List[CalendarReadWithAccess], summary="List calendars")
def list_calendars(
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> List[CalendarReadWithAccess]:
    """Calendars the current user owns or has been invited to; everything for Manager/Admin."""
    statement = (
        select(Calendar)
        .where(accessible_calendars_condition(principal))
        .order_by(Calendar.created_at)
    )
    calendars = session.exec(statement).all()
    return [
        _with_access(
            calendar,
            resolve_access(session, principal, ResourceKind.CALENDAR, calendar.id),
        )
        for calendar in calendars
    ]


@router.post(
    "/",
    response_model=CalendarReadWithAccess,
    status_code=status.HTTP_201_CREATED,
    summary="Create calendar",
)
def create_calendar(
    payload: CalendarCreate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> CalendarReadWithAccess:
    calendar = Calendar(
        name=payload.name.strip(),
        is_template=payload.is_template,
        owner_id=principal.id,
    )
    session.add(calendar)
    session.flush()
    for index, name in enumerate(settings.DEFAULT_SWIMLANES):
        session.add(Swimlane(name=name, calendar_id=calendar.id, sort_order=index))
    session.commit()
    session.refresh(calendar)
    logger.info("User %s created calendar %s", principal.id, calendar.id)
    return _with_access(calendar, resolve_access(session, principal, ResourceKind.CALENDAR, calendar.id))


@router.get("/{calendar_id}", response_model=CalendarDetail, summary="Get calendar with contents")
def get_calendar(
    calendar_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> CalendarDetail:
    calendar = _get_calendar_or_404(session, calendar_id)
    level = require_access(session, principal, Action.VIEW, ResourceKind.CALENDAR, calendar_id)

    swimlanes = session.exec(
        select(Swimlane).where(Swimlane.calendar_id == calendar_id).order_by(Swimlane.sort_order)
    ).all()
    campaigns = session.exec(
        select(Campaign).where(Campaign.calendar_id == calendar_id).order_by(Campaign.created_at)
    ).all()
    activities = session.exec(
        select(Activity).where(Activity.calendar_id == calendar_id).order_by(Activity.start_date)
    ).all()

    return CalendarDetail(
        calendar=_with_access(calendar, level),
        swimlanes=[SwimlaneRead.model_validate(s) for s in swimlanes],
        campaigns=[CampaignRead.model_validate(c) for c in campaigns],
        activities=[ActivityRead.model_validate(a) for a in activities],
    )


@router.put("/{calendar_id}", response_model=CalendarReadWithAccess, summary="Update calendar")
def update_calendar(
    calendar_id: UUID,
    payload: CalendarUpdate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> CalendarReadWithAccess:
    calendar = _get_calendar_or_404(session, calendar_id)
    level = require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, calendar_id)

    data = payload.model_dump(exclude_unset=True)
    if "name" in data and data["name"] is not None:
        calendar.name = data["name"].strip()
    if data.get("is_template") is not None:
        calendar.is_template = data["is_template"]
    calendar.touch()
    session.add(calendar)
    session.commit()
    session.refresh(calendar)
    return _with_access(calendar, level)


@router.delete(
    "/{calendar_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete calendar",
)
def delete_calendar(
    calendar_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> None:
    """Owner or Manager/Admin only; swimlanes, campaigns, activities and grants go with it."""
    calendar = _get_calendar_or_404(session, calendar_id)
    require_access(session, principal, Action.DELETE, ResourceKind.CALENDAR, calendar_id)

    session.delete(calendar)
    session.commit()
    logger.info("User %s deleted calendar %s", principal.id, calendar_id)
