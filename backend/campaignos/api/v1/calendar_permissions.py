from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from campaignos.api.deps import get_current_user, get_principal
from campaignos.db import SessionDep
from campaignos.models import CalendarPermission, User
from campaignos.schemas import (
    CalendarPermissionCreate,
    CalendarPermissionRead,
    PermissionUpdate,
)
from campaignos.services import sharing
from campaignos.services.permissions import Principal

router = APIRouter()


def _to_read(permission: CalendarPermission, user: User | None) -> CalendarPermissionRead:
    data = CalendarPermissionRead.model_validate(permission)
    if user:
        data.user_email = user.email
        data.user_name = user.name
    return data


@router.get("/", response_model=List[CalendarPermissionRead], summary="List calendar permissions")
def list_calendar_permissions(
    session: SessionDep,
    calendar_id: UUID = Query(..., description="Calendar to list grants for"),
    principal: Principal = Depends(get_principal),
) -> List[CalendarPermissionRead]:
    rows = sharing.list_calendar_permissions(session, principal, calendar_id)
    return [_to_read(permission, user) for permission, user in rows]


@router.post(
    "/",
    response_model=CalendarPermissionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Share calendar with a user",
)
def grant_calendar_permission(
    payload: CalendarPermissionCreate,
    session: SessionDep,
    current_user: User = Depends(get_current_user),
    principal: Principal = Depends(get_principal),
) -> CalendarPermissionRead:
    permission, user = sharing.grant_calendar_permission(
        session,
        principal,
        current_user,
        calendar_id=payload.calendar_id,
        email=payload.email,
        access_type=payload.access_type,
    )
    return _to_read(permission, user)


@router.put(
    "/{permission_id}",
    response_model=CalendarPermissionRead,
    summary="Change calendar access type",
)
def change_calendar_permission(
    permission_id: UUID,
    payload: PermissionUpdate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> CalendarPermissionRead:
    permission = sharing.change_calendar_permission(
        session, principal, permission_id=permission_id, access_type=payload.access_type
    )
    return _to_read(permission, session.get(User, permission.user_id))


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke calendar access",
)
def revoke_calendar_permission(
    permission_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> None:
    sharing.revoke_calendar_permission(session, principal, permission_id=permission_id)
