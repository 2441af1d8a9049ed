from __future__ import annotations

import json
import logging
from functools import lru_cache
from uuid import UUID

import redis
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from campaignos.core.config import settings
from campaignos.models import (
    AccessType,
    Calendar,
    Campaign,
    Notification,
    NotificationType,
    RelatedType,
    User,
)

logger = logging.getLogger(__name__)


@lru_cache
def _get_redis_client() -> redis.Redis:
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)


def publish_notification(notification: Notification) -> None:
    """Push a notification onto the Redis channel for real-time clients."""
    if not settings.NOTIFICATIONS_PUBLISH_ENABLED:
        return
    message = {
        "id": str(notification.id),
        "user_id": str(notification.user_id),
        "type": NotificationType(notification.type).value,
        "title": notification.title,
        "message": notification.message,
        "related_type": RelatedType(notification.related_type).value
        if notification.related_type
        else None,
        "related_id": str(notification.related_id) if notification.related_id else None,
    }
    try:
        _get_redis_client().publish(settings.NOTIFICATIONS_CHANNEL, json.dumps(message))
        logger.debug("Published notification %s for user %s", notification.id, notification.user_id)
    except RedisError as e:
        logger.warning("Could not publish notification %s: %s", notification.id, e)


def create_notification(
    session: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    related_type: RelatedType | None = None,
    related_id: UUID | None = None,
) -> Notification:
    """Create a notification for a user."""
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        related_type=related_type,
        related_id=related_id,
    )
    session.add(notification)
    return notification


def deliver_notification(session: Session, **fields) -> Notification | None:
    """Persist and publish a notification without failing the caller.

    Must run after the change it reports has been committed; a failure here
    is logged and the change stands.
    """
    try:
        notification = create_notification(session, **fields)
        session.commit()
        session.refresh(notification)
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning("Could not store notification for user %s: %s", fields.get("user_id"), e)
        return None
    publish_notification(notification)
    return notification


def notify_calendar_invite(
    session: Session, user_id: UUID, calendar: Calendar, inviter: User, access_type: AccessType
) -> Notification | None:
    return deliver_notification(
        session,
        user_id=user_id,
        type=NotificationType.CALENDAR_INVITE,
        title="Workspace Invitation",
        message=(
            f'{inviter.name} invited you to collaborate on workspace "{calendar.name}" '
            f"with {AccessType(access_type).value} access."
        ),
        related_type=RelatedType.CALENDAR,
        related_id=calendar.id,
    )


def notify_campaign_invite(
    session: Session, user_id: UUID, campaign: Campaign, inviter: User, access_type: AccessType
) -> Notification | None:
    return deliver_notification(
        session,
        user_id=user_id,
        type=NotificationType.CAMPAIGN_INVITE,
        title="Campaign Invitation",
        message=(
            f'{inviter.name} invited you to collaborate on campaign "{campaign.name}" '
            f"with {AccessType(access_type).value} access."
        ),
        related_type=RelatedType.CAMPAIGN,
        related_id=campaign.id,
    )


def notify_permission_changed(
    session: Session,
    user_id: UUID,
    related_type: RelatedType,
    related_id: UUID,
    resource_name: str,
    access_type: AccessType,
) -> Notification | None:
    label = "workspace" if related_type == RelatedType.CALENDAR else related_type.value
    return deliver_notification(
        session,
        user_id=user_id,
        type=NotificationType.PERMISSION_CHANGED,
        title="Permission Updated",
        message=(
            f'Your access to {label} "{resource_name}" has been changed to '
            f"{AccessType(access_type).value}."
        ),
        related_type=related_type,
        related_id=related_id,
    )


def notify_access_removed(
    session: Session,
    user_id: UUID,
    related_type: RelatedType,
    related_id: UUID,
    resource_name: str,
) -> Notification | None:
    label = "workspace" if related_type == RelatedType.CALENDAR else related_type.value
    return deliver_notification(
        session,
        user_id=user_id,
        type=NotificationType.PERMISSION_CHANGED,
        title="Access Removed",
        message=f'Your access to {label} "{resource_name}" has been removed.',
        related_type=related_type,
        related_id=related_id,
    )


def notify_comment_added(
    session: Session, user_id: UUID, activity_title: str, comment_id: UUID, author: User
) -> Notification | None:
    return deliver_notification(
        session,
        user_id=user_id,
        type=NotificationType.COMMENT_ADDED,
        title="New Comment",
        message=f'{author.name} commented on "{activity_title}".',
        related_type=RelatedType.COMMENT,
        related_id=comment_id,
    )
