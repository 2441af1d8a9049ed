from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import select

from campaignos.api.deps import get_principal
from campaignos.db import SessionDep
from campaignos.models import Calendar, Campaign
from campaignos.schemas import CampaignCreate, CampaignRead, CampaignUpdate
from campaignos.services.permissions import (
    Action,
    Principal,
    ResourceKind,
    require_access,
    shared_campaigns_condition,
)

router = APIRouter()

logger = logging.getLogger(__name__)


def _get_campaign_or_404(session: SessionDep, campaign_id: UUID) -> Campaign:
    campaign = session.get(Campaign, campaign_id)
    if not campaign:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Campaign not found")
    return campaign


@router.get("/", response_model=List[CampaignRead], summary="List campaigns of a calendar")
def list_campaigns(
    session: SessionDep,
    calendar_id: UUID = Query(...),
    principal: Principal = Depends(get_principal),
) -> List[Campaign]:
    if not session.get(Calendar, calendar_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar not found")
    require_access(session, principal, Action.VIEW, ResourceKind.CALENDAR, calendar_id)
    statement = (
        select(Campaign).where(Campaign.calendar_id == calendar_id).order_by(Campaign.created_at)
    )
    return list(session.exec(statement).all())


@router.get("/shared", response_model=List[CampaignRead], summary="Campaigns shared with me")
def list_shared_campaigns(
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> List[Campaign]:
    """Campaigns granted to the current user directly, independent of calendar access."""
    statement = (
        select(Campaign)
        .where(shared_campaigns_condition(principal))
        .order_by(Campaign.created_at)
    )
    return list(session.exec(statement).all())


@router.post(
    "/",
    response_model=CampaignRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create campaign",
)
def create_campaign(
    payload: CampaignCreate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Campaign:
    if not session.get(Calendar, payload.calendar_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar not found")
    require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, payload.calendar_id)

    campaign = Campaign(name=payload.name.strip(), calendar_id=payload.calendar_id)
    session.add(campaign)
    session.commit()
    session.refresh(campaign)
    return campaign


@router.get("/{campaign_id}", response_model=CampaignRead, summary="Get campaign")
def get_campaign(
    campaign_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Campaign:
    campaign = _get_campaign_or_404(session, campaign_id)
    require_access(session, principal, Action.VIEW, ResourceKind.CAMPAIGN, campaign_id)
    return campaign


@router.put("/{campaign_id}", response_model=CampaignRead, summary="Rename campaign")
def update_campaign(
    campaign_id: UUID,
    payload: CampaignUpdate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> Campaign:
    campaign = _get_campaign_or_404(session, campaign_id)
    require_access(session, principal, Action.EDIT, ResourceKind.CAMPAIGN, campaign_id)

    if payload.name is not None:
        campaign.name = payload.name.strip()
    session.add(campaign)
    session.commit()
    session.refresh(campaign)
    return campaign


@router.delete(
    "/{campaign_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete campaign",
)
def delete_campaign(
    campaign_id: UUID,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> None:
    """Activities of the campaign stay in the calendar with ``campaign_id`` cleared."""
    campaign = _get_campaign_or_404(session, campaign_id)
    require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, campaign.calendar_id)

    session.delete(campaign)
    session.commit()
    logger.info("User %s deleted campaign %s", principal.id, campaign_id)
