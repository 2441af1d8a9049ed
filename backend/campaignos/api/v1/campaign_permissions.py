from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from campaignos.api.deps import get_current_user, get_principal
from campaignos.db import SessionDep
from campaignos.models import CampaignPermission, User
from campaignos.schemas import (
    CampaignPermissionCreate,
    CampaignPermissionRead,
    PermissionUpdate,
)
from campaignos.services import sharing
from campaignos.services.permissions import Principal

router = APIRouter()


def _to_read(permission: CampaignPermission, user: User | None) -> CampaignPermissionRead:
    data = CampaignPermissionRead.model_validate(permission)
    if user:
        data.user_email = user.email
        data.user_name = user.name
    return data


@router.get("/", response_model=List[CampaignPermissionRead], summary="List campaign permissions")
def list_campaign_permissions(
    session: SessionDep,
    campaign_id: UUID = Query(..., description="Campaign to list grants for"),
    principal: Principal = Depends(get_principal),
) -> List[CampaignPermissionRead]:
    rows = sharing.list_campaign_permissions(session, principal, campaign_id)
    return [_to_read(permission, user) for permission, user in rows]


@router.post(
    "/",
    response_model=CampaignPermissionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Share campaign with a user",
)
def grant_campaign_permission(
    payload: CampaignPermissionCreate,
    session: SessionDep,
    current_user: User = Depends(get_current_user),
    principal: Principal = Depends(get_principal),
) -> CampaignPermissionRead:
    permission, user = sharing.grant_campaign_permission(
        session,
        principal,
        current_user,
        campaign_id=payload.campaign_id,
        email=payload.email,
        access_type=payload.access_type,
    )
    return _to_read(permission, user)


@router.put(
    "/{permission_id}",
    response_model=CampaignPermissionRead,
    summary="Change campaign access type",
)
def change_campaign_permission(
    permission_id: UUID,
    payload: PermissionUpdate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> CampaignPermissionRead:
    permission = sharing.change_campaign_permission(
        session, principal, permission_id=permission_id, access_type=payload.access_type
    )
    return _to_read(permission, session.get(User, permission.user_id))


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke campaign access",
)
def revoke_campaign_permission(
    permission_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> None:
    sharing.revoke_campaign_permission(session, principal, permission_id=permission_id)
