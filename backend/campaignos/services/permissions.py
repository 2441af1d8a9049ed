"""Permission resolution and authorization for every calendar resource.

Access is computed in one place:

1. Manager/Admin principals get owner-level access everywhere, without
   touching the grant tables.
2. The owner of the root calendar gets owner-level access.
3. Otherwise the most specific grant decides: a CampaignPermission for
   campaigns, then the CalendarPermission of the root calendar.

Swimlanes and activities have no grants of their own and always resolve
against their calendar.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union
from uuid import UUID

from sqlalchemy import or_, true
from sqlmodel import Session, select

from campaignos.core.exceptions import AccessDenied
from campaignos.models import (
    AccessType,
    Activity,
    Calendar,
    CalendarPermission,
    Campaign,
    CampaignPermission,
    Swimlane,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

ELEVATED_ROLES = frozenset({UserRole.MANAGER, UserRole.ADMIN})


class AccessLevel(IntEnum):
    NONE = 0
    VIEW = 1
    EDIT = 2
    OWNER = 3


class ResourceKind(str, Enum):
    CALENDAR = "calendar"
    CAMPAIGN = "campaign"
    SWIMLANE = "swimlane"
    ACTIVITY = "activity"


class Action(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    SHARE = "share"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as seen by the authorization core."""

    id: UUID
    role: UserRole

    @property
    def is_elevated(self) -> bool:
        return self.role in ELEVATED_ROLES

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, role=UserRole(user.role))


@dataclass(frozen=True)
class Allowed:
    level: AccessLevel

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Denied:
    level: AccessLevel
    reason: str

    def __bool__(self) -> bool:
        return False


Decision = Union[Allowed, Denied]


_GRANT_LEVELS = {
    AccessType.EDIT: AccessLevel.EDIT,
    AccessType.VIEW: AccessLevel.VIEW,
    AccessType.COPY: AccessLevel.VIEW,
}


def level_for_access_type(access_type: AccessType | str) -> AccessLevel:
    return _GRANT_LEVELS[AccessType(access_type)]


def _calendar_level(session: Session, principal: Principal, calendar_id: UUID) -> AccessLevel:
    calendar = session.get(Calendar, calendar_id)
    if calendar is None:
        return AccessLevel.NONE
    if calendar.owner_id == principal.id:
        return AccessLevel.OWNER

    grant = session.exec(
        select(CalendarPermission).where(
            CalendarPermission.calendar_id == calendar_id,
            CalendarPermission.user_id == principal.id,
        )
    ).first()
    return level_for_access_type(grant.access_type) if grant else AccessLevel.NONE


def _campaign_level(session: Session, principal: Principal, campaign_id: UUID) -> AccessLevel:
    campaign = session.get(Campaign, campaign_id)
    if campaign is None:
        return AccessLevel.NONE

    calendar = session.get(Calendar, campaign.calendar_id)
    if calendar is not None and calendar.owner_id == principal.id:
        return AccessLevel.OWNER

    grant = session.exec(
        select(CampaignPermission).where(
            CampaignPermission.campaign_id == campaign_id,
            CampaignPermission.user_id == principal.id,
        )
    ).first()
    if grant is not None:
        return level_for_access_type(grant.access_type)
    return _calendar_level(session, principal, campaign.calendar_id)


def root_calendar_id(
    session: Session, resource_kind: ResourceKind, resource_id: UUID
) -> UUID | None:
    """Return the calendar a resource lives in, or None if it does not exist."""
    if resource_kind == ResourceKind.CALENDAR:
        return resource_id if session.get(Calendar, resource_id) else None
    if resource_kind == ResourceKind.SWIMLANE:
        swimlane = session.get(Swimlane, resource_id)
        return swimlane.calendar_id if swimlane else None
    if resource_kind == ResourceKind.ACTIVITY:
        activity = session.get(Activity, resource_id)
        return activity.calendar_id if activity else None
    if resource_kind == ResourceKind.CAMPAIGN:
        campaign = session.get(Campaign, resource_id)
        return campaign.calendar_id if campaign else None
    raise ValueError(f"Unknown resource kind: {resource_kind}")


def resolve_access(
    session: Session,
    principal: Principal,
    resource_kind: ResourceKind,
    resource_id: UUID,
) -> AccessLevel:
    if principal.is_elevated:
        return AccessLevel.OWNER

    resource_kind = ResourceKind(resource_kind)
    if resource_kind == ResourceKind.CAMPAIGN:
        return _campaign_level(session, principal, resource_id)

    calendar_id = root_calendar_id(session, resource_kind, resource_id)
    if calendar_id is None:
        return AccessLevel.NONE
    return _calendar_level(session, principal, calendar_id)


def required_level(action: Action) -> AccessLevel:
    action = Action(action)
    if action == Action.VIEW:
        return AccessLevel.VIEW
    if action == Action.EDIT:
        return AccessLevel.EDIT
    # deleting a resource or managing its grants is reserved for the owner;
    # editors remove calendar contents through an edit on the calendar
    return AccessLevel.OWNER


def authorize(
    session: Session,
    principal: Principal,
    action: Action,
    resource_kind: ResourceKind,
    resource_id: UUID,
) -> Decision:
    level = resolve_access(session, principal, resource_kind, resource_id)
    needed = required_level(action)
    if level >= needed:
        return Allowed(level=level)

    if needed == AccessLevel.OWNER:
        reason = f"Only the owner can {Action(action).value} this {ResourceKind(resource_kind).value}"
    else:
        reason = f"Forbidden - {needed.name.lower()} access required"
    logger.info(
        "Denied %s on %s %s for user %s (level=%s)",
        Action(action).value,
        ResourceKind(resource_kind).value,
        resource_id,
        principal.id,
        level.name,
    )
    return Denied(level=level, reason=reason)


def require_access(
    session: Session,
    principal: Principal,
    action: Action,
    resource_kind: ResourceKind,
    resource_id: UUID,
) -> AccessLevel:
    """Authorize or raise ``AccessDenied``; returns the resolved level."""
    decision = authorize(session, principal, action, resource_kind, resource_id)
    if isinstance(decision, Denied):
        raise AccessDenied(decision.reason)
    return decision.level


def accessible_calendars_condition(principal: Principal):
    """SQL condition selecting calendars the principal may at least view."""
    if principal.is_elevated:
        return true()
    granted = select(CalendarPermission.calendar_id).where(
        CalendarPermission.user_id == principal.id
    )
    return or_(Calendar.owner_id == principal.id, Calendar.id.in_(granted))


def shared_campaigns_condition(principal: Principal):
    """SQL condition selecting campaigns shared with the principal directly."""
    granted = select(CampaignPermission.campaign_id).where(
        CampaignPermission.user_id == principal.id
    )
    return Campaign.id.in_(granted)
