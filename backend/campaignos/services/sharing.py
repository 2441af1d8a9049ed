"""Grant, change and revoke calendar and campaign permissions.

Each transition is committed first and then reported to the affected user
through the notification sink; a failed notification never undoes the
permission change.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from campaignos.core.exceptions import (
    PermissionConflict,
    ResourceNotFound,
    ValidationFailed,
)
from campaignos.models import (
    AccessType,
    Calendar,
    CalendarPermission,
    Campaign,
    CampaignPermission,
    RelatedType,
    User,
)
from campaignos.services import notifications
from campaignos.services.permissions import (
    Action,
    Principal,
    ResourceKind,
    require_access,
)

logger = logging.getLogger(__name__)


def _find_user_by_email(session: Session, email: str) -> User:
    user = session.exec(select(User).where(User.email == email.strip().lower())).first()
    if user is None:
        raise ResourceNotFound("User not found with this email")
    return user


def _get_calendar(session: Session, calendar_id: UUID) -> Calendar:
    calendar = session.get(Calendar, calendar_id)
    if calendar is None:
        raise ResourceNotFound("Calendar not found")
    return calendar


def _get_campaign(session: Session, campaign_id: UUID) -> Campaign:
    campaign = session.get(Campaign, campaign_id)
    if campaign is None:
        raise ResourceNotFound("Campaign not found")
    return campaign


def _commit_grant(session: Session, grant) -> None:
    session.add(grant)
    try:
        session.commit()
    except IntegrityError as exc:
        # lost a race with a concurrent invite for the same user
        session.rollback()
        raise PermissionConflict() from exc
    session.refresh(grant)


# Calendar permissions


def list_calendar_permissions(
    session: Session, principal: Principal, calendar_id: UUID
) -> list[tuple[CalendarPermission, User]]:
    _get_calendar(session, calendar_id)
    require_access(session, principal, Action.VIEW, ResourceKind.CALENDAR, calendar_id)
    statement = (
        select(CalendarPermission, User)
        .join(User, User.id == CalendarPermission.user_id)
        .where(CalendarPermission.calendar_id == calendar_id)
        .order_by(CalendarPermission.created_at)
    )
    return list(session.exec(statement).all())


def grant_calendar_permission(
    session: Session,
    principal: Principal,
    actor: User,
    *,
    calendar_id: UUID,
    email: str,
    access_type: AccessType = AccessType.VIEW,
) -> tuple[CalendarPermission, User]:
    calendar = _get_calendar(session, calendar_id)
    require_access(session, principal, Action.SHARE, ResourceKind.CALENDAR, calendar_id)

    target = _find_user_by_email(session, email)
    if target.id == calendar.owner_id:
        raise ValidationFailed("Calendar owner already has full access")

    existing = session.exec(
        select(CalendarPermission).where(
            CalendarPermission.calendar_id == calendar_id,
            CalendarPermission.user_id == target.id,
        )
    ).first()
    if existing is not None:
        raise PermissionConflict("User already has access to this calendar")

    permission = CalendarPermission(
        calendar_id=calendar_id, user_id=target.id, access_type=AccessType(access_type)
    )
    _commit_grant(session, permission)
    logger.info(
        "User %s granted %s on calendar %s to %s",
        principal.id,
        permission.access_type.value,
        calendar_id,
        target.id,
    )

    notifications.notify_calendar_invite(
        session, target.id, calendar, actor, permission.access_type
    )
    return permission, target


def change_calendar_permission(
    session: Session,
    principal: Principal,
    *,
    permission_id: UUID,
    access_type: AccessType,
) -> CalendarPermission:
    permission = session.get(CalendarPermission, permission_id)
    if permission is None:
        raise ResourceNotFound("Permission not found")
    calendar = _get_calendar(session, permission.calendar_id)
    require_access(session, principal, Action.SHARE, ResourceKind.CALENDAR, calendar.id)

    permission.access_type = AccessType(access_type)
    permission.touch()
    session.add(permission)
    session.commit()
    session.refresh(permission)
    logger.info(
        "User %s changed calendar permission %s to %s",
        principal.id,
        permission_id,
        permission.access_type.value,
    )

    notifications.notify_permission_changed(
        session,
        permission.user_id,
        RelatedType.CALENDAR,
        calendar.id,
        calendar.name,
        permission.access_type,
    )
    return permission


def revoke_calendar_permission(
    session: Session, principal: Principal, *, permission_id: UUID
) -> None:
    permission = session.get(CalendarPermission, permission_id)
    if permission is None:
        raise ResourceNotFound("Permission not found")
    calendar = _get_calendar(session, permission.calendar_id)
    require_access(session, principal, Action.SHARE, ResourceKind.CALENDAR, calendar.id)

    user_id, calendar_id, calendar_name = permission.user_id, calendar.id, calendar.name
    session.delete(permission)
    session.commit()
    logger.info("User %s revoked calendar permission %s", principal.id, permission_id)

    notifications.notify_access_removed(
        session, user_id, RelatedType.CALENDAR, calendar_id, calendar_name
    )


# Campaign permissions


def list_campaign_permissions(
    session: Session, principal: Principal, campaign_id: UUID
) -> list[tuple[CampaignPermission, User]]:
    _get_campaign(session, campaign_id)
    require_access(session, principal, Action.VIEW, ResourceKind.CAMPAIGN, campaign_id)
    statement = (
        select(CampaignPermission, User)
        .join(User, User.id == CampaignPermission.user_id)
        .where(CampaignPermission.campaign_id == campaign_id)
        .order_by(CampaignPermission.created_at)
    )
    return list(session.exec(statement).all())


def grant_campaign_permission(
    session: Session,
    principal: Principal,
    actor: User,
    *,
    campaign_id: UUID,
    email: str,
    access_type: AccessType = AccessType.VIEW,
) -> tuple[CampaignPermission, User]:
    campaign = _get_campaign(session, campaign_id)
    require_access(session, principal, Action.SHARE, ResourceKind.CAMPAIGN, campaign_id)

    target = _find_user_by_email(session, email)
    if target.id == principal.id:
        raise ValidationFailed("Cannot invite yourself")
    calendar = session.get(Calendar, campaign.calendar_id)
    if calendar is not None and target.id == calendar.owner_id:
        raise ValidationFailed("Calendar owner already has full access")

    existing = session.exec(
        select(CampaignPermission).where(
            CampaignPermission.campaign_id == campaign_id,
            CampaignPermission.user_id == target.id,
        )
    ).first()
    if existing is not None:
        raise PermissionConflict("User already has access to this campaign")

    permission = CampaignPermission(
        campaign_id=campaign_id,
        user_id=target.id,
        access_type=AccessType(access_type),
        invited_by=principal.id,
    )
    _commit_grant(session, permission)
    logger.info(
        "User %s granted %s on campaign %s to %s",
        principal.id,
        permission.access_type.value,
        campaign_id,
        target.id,
    )

    notifications.notify_campaign_invite(
        session, target.id, campaign, actor, permission.access_type
    )
    return permission, target


def change_campaign_permission(
    session: Session,
    principal: Principal,
    *,
    permission_id: UUID,
    access_type: AccessType,
) -> CampaignPermission:
    permission = session.get(CampaignPermission, permission_id)
    if permission is None:
        raise ResourceNotFound("Permission not found")
    campaign = _get_campaign(session, permission.campaign_id)
    require_access(session, principal, Action.SHARE, ResourceKind.CAMPAIGN, campaign.id)

    permission.access_type = AccessType(access_type)
    permission.touch()
    session.add(permission)
    session.commit()
    session.refresh(permission)
    logger.info(
        "User %s changed campaign permission %s to %s",
        principal.id,
        permission_id,
        permission.access_type.value,
    )

    notifications.notify_permission_changed(
        session,
        permission.user_id,
        RelatedType.CAMPAIGN,
        campaign.id,
        campaign.name,
        permission.access_type,
    )
    return permission


def revoke_campaign_permission(
    session: Session, principal: Principal, *, permission_id: UUID
) -> None:
    permission = session.get(CampaignPermission, permission_id)
    if permission is None:
        raise ResourceNotFound("Permission not found")
    campaign = _get_campaign(session, permission.campaign_id)
    require_access(session, principal, Action.SHARE, ResourceKind.CAMPAIGN, campaign.id)

    user_id, campaign_id, campaign_name = permission.user_id, campaign.id, campaign.name
    session.delete(permission)
    session.commit()
    logger.info("User %s revoked campaign permission %s", principal.id, permission_id)

    notifications.notify_access_removed(
        session, user_id, RelatedType.CAMPAIGN, campaign_id, campaign_name
    )
