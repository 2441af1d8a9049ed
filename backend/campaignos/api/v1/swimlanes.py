from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import select

from campaignos.api.deps import get_principal
from campaignos.db import SessionDep
from campaignos.models import Calendar, Swimlane
from campaignos.schemas import SwimlaneCreate, SwimlaneRead, SwimlaneUpdate
from campaignos.services.permissions import Action, Principal, ResourceKind, require_access

router = APIRouter()


def _get_swimlane_or_404(session: SessionDep, swimlane_id: UUID) -> Swimlane:
    swimlane = session.get(Swimlane, swimlane_id)
    if not swimlane:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Swimlane not found")
    return swimlane


@router.get("/", response_model=List[SwimlaneRead], summary="List swimlanes of a calendar")
def list_swimlanes(
    session: SessionDep,
    calendar_id: UUID = Query(...),
    principal: Principal = Depends(get_principal),
) -> List[Swimlane]:
    if not session.get(Calendar, calendar_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar not found")
    require_access(session, principal, Action.VIEW, ResourceKind.CALENDAR, calendar_id)
    statement = (
        select(Swimlane).where(Swimlane.calendar_id == calendar_id).order_by(Swimlane.sort_order)
    )
    return list(session.exec(statement).all())


@router.post(
    "/",
    response_model=SwimlaneRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create swimlane",
)
def create_swimlane(
    payload: SwimlaneCreate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Swimlane:
    if not session.get(Calendar, payload.calendar_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar not found")
    require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, payload.calendar_id)

    swimlane = Swimlane(**payload.model_dump())
    session.add(swimlane)
    session.commit()
    session.refresh(swimlane)
    return swimlane


@router.put("/{swimlane_id}", response_model=SwimlaneRead, summary="Update swimlane")
def update_swimlane(
    swimlane_id: UUID,
    payload: SwimlaneUpdate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Swimlane:
    swimlane = _get_swimlane_or_404(session, swimlane_id)
    require_access(session, principal, Action.EDIT, ResourceKind.SWIMLANE, swimlane_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(swimlane, field, value)
    session.add(swimlane)
    session.commit()
    session.refresh(swimlane)
    return swimlane


@router.delete(
    "/{swimlane_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete swimlane",
)
def delete_swimlane(
    swimlane_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> None:
    """Deletes the activities placed in the swimlane as well."""
    swimlane = _get_swimlane_or_404(session, swimlane_id)
    require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, swimlane.calendar_id)

    session.delete(swimlane)
    session.commit()
