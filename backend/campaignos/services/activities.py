"""Activity mutations with their audit entries.

Every function here authorizes, mutates and records history on the given
session without committing; the route handler commits once so the change
and its history entry land together or not at all.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional
from uuid import UUID

from sqlmodel import Session, select

from campaignos.core.config import settings
from campaignos.core.exceptions import ResourceNotFound, ValidationFailed
from campaignos.models import (
    Activity,
    ActivityStatus,
    ActivityType,
    Calendar,
    Campaign,
    Region,
    Swimlane,
    Vendor,
)
from campaignos.schemas.activity import ActivityCreate, ActivityUpdate, BulkActivityOperation
from campaignos.services.history import (
    record_created,
    record_deleted,
    record_updated,
    snapshot_activity,
)
from campaignos.services.permissions import (
    Action,
    Principal,
    ResourceKind,
    require_access,
)

logger = logging.getLogger(__name__)


def get_activity(session: Session, activity_id: UUID) -> Activity:
    activity = session.get(Activity, activity_id)
    if activity is None:
        raise ResourceNotFound("Activity not found")
    return activity


def _check_swimlane(session: Session, calendar_id: UUID, swimlane_id: UUID) -> None:
    swimlane = session.get(Swimlane, swimlane_id)
    if swimlane is None or swimlane.calendar_id != calendar_id:
        raise ValidationFailed("Swimlane does not belong to this calendar")


def _check_campaign(session: Session, calendar_id: UUID, campaign_id: Optional[UUID]) -> None:
    if campaign_id is None:
        return
    campaign = session.get(Campaign, campaign_id)
    if campaign is None or campaign.calendar_id != calendar_id:
        raise ValidationFailed("Campaign does not belong to this calendar")


def _check_catalog(session: Session, data: dict[str, Any]) -> None:
    if data.get("type_id") is not None and session.get(ActivityType, data["type_id"]) is None:
        raise ValidationFailed("Activity type not found")
    if data.get("vendor_id") is not None and session.get(Vendor, data["vendor_id"]) is None:
        raise ValidationFailed("Vendor not found")


def create_activity(session: Session, principal: Principal, payload: ActivityCreate) -> Activity:
    if session.get(Calendar, payload.calendar_id) is None:
        raise ResourceNotFound("Calendar not found")
    require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, payload.calendar_id)
    _check_swimlane(session, payload.calendar_id, payload.swimlane_id)
    _check_campaign(session, payload.calendar_id, payload.campaign_id)

    data = payload.model_dump()
    _check_catalog(session, data)
    data["title"] = data["title"].strip()
    activity = Activity(**data)
    session.add(activity)
    session.flush()
    record_created(session, activity, principal.id)
    logger.debug("User %s created activity %s", principal.id, activity.id)
    return activity


def update_activity(
    session: Session, principal: Principal, activity_id: UUID, payload: ActivityUpdate
) -> Activity:
    activity = get_activity(session, activity_id)
    require_access(session, principal, Action.EDIT, ResourceKind.ACTIVITY, activity_id)

    data = payload.model_dump(exclude_unset=True)
    for field in ("title", "swimlane_id", "start_date", "end_date", "status", "currency", "region"):
        if field in data and data[field] is None:
            raise ValidationFailed(f"{field} cannot be null")

    start_date = data.get("start_date", activity.start_date)
    end_date = data.get("end_date", activity.end_date)
    if start_date > end_date:
        raise ValidationFailed("Start date cannot be after end date")
    if "swimlane_id" in data:
        _check_swimlane(session, activity.calendar_id, data["swimlane_id"])
    if "campaign_id" in data:
        _check_campaign(session, activity.calendar_id, data["campaign_id"])
    _check_catalog(session, data)

    before = snapshot_activity(activity)
    for field, value in data.items():
        setattr(activity, field, value)
    activity.touch()
    session.add(activity)
    record_updated(session, before, activity, principal.id)
    return activity


def delete_activity(session: Session, principal: Principal, activity_id: UUID) -> None:
    """Delete an activity; comments go with it, history stays."""
    activity = get_activity(session, activity_id)
    require_access(session, principal, Action.EDIT, ResourceKind.ACTIVITY, activity_id)

    record_deleted(session, activity, principal.id)
    session.delete(activity)
    logger.info("User %s deleted activity %s", principal.id, activity_id)


def _bulk_changes(
    session: Session, operation: BulkActivityOperation, activities: Iterable[Activity]
) -> dict[str, Any]:
    target = operation.target_value
    if operation.operation == "changeStatus":
        try:
            return {"status": ActivityStatus(target)}
        except ValueError:
            raise ValidationFailed("Valid target_value (status) is required") from None
    if operation.operation == "changeRegion":
        try:
            return {"region": Region(target)}
        except ValueError:
            raise ValidationFailed("Valid target_value (region) is required") from None
    if operation.operation == "changeSwimlane":
        if not target:
            raise ValidationFailed("target_value (swimlane id) is required")
        try:
            swimlane_id = UUID(target)
        except ValueError:
            raise ValidationFailed("target_value must be a swimlane id") from None
        for activity in activities:
            _check_swimlane(session, activity.calendar_id, swimlane_id)
        return {"swimlane_id": swimlane_id}
    if operation.operation == "changeCampaign":
        # empty target removes the activities from their campaign
        if not target:
            return {"campaign_id": None}
        try:
            campaign_id = UUID(target)
        except ValueError:
            raise ValidationFailed("target_value must be a campaign id") from None
        for activity in activities:
            _check_campaign(session, activity.calendar_id, campaign_id)
        return {"campaign_id": campaign_id}
    raise ValidationFailed(f"Unknown operation: {operation.operation}")


def bulk_update_activities(
    session: Session, principal: Principal, operation: BulkActivityOperation
) -> tuple[str, list[UUID]]:
    """Apply one operation to many activities; one history entry per activity.

    Ids that match no activity are skipped. Returns a summary message and the
    ids that were processed.
    """
    if len(operation.activity_ids) > settings.BULK_MAX_ACTIVITIES:
        raise ValidationFailed(
            f"Maximum {settings.BULK_MAX_ACTIVITIES} activities per bulk operation"
        )

    activities = list(
        session.exec(select(Activity).where(Activity.id.in_(set(operation.activity_ids)))).all()
    )
    if not activities:
        raise ResourceNotFound("No activities found")

    for calendar_id in sorted({a.calendar_id for a in activities}, key=str):
        require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, calendar_id)

    processed = [activity.id for activity in activities]

    if operation.operation == "delete":
        for activity in activities:
            record_deleted(session, activity, principal.id)
            session.delete(activity)
        logger.info("User %s bulk deleted %s activities", principal.id, len(processed))
        return f"{len(processed)} activities deleted", processed

    changes = _bulk_changes(session, operation, activities)
    for activity in activities:
        before = snapshot_activity(activity)
        for field, value in changes.items():
            setattr(activity, field, value)
        activity.touch()
        session.add(activity)
        record_updated(session, before, activity, principal.id)
    logger.info(
        "User %s bulk %s on %s activities", principal.id, operation.operation, len(processed)
    )
    return f"{len(processed)} activities updated", processed
