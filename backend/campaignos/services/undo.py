"""Restore activities from the snapshot stored on a history entry.

An undo never edits or removes existing history: it appends a new entry
describing the restoration. Undo is not a toggle; applying the same entry
twice writes the same snapshot twice. Edits made between the original
mutation and the undo are overwritten (last write wins).
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from campaignos.core.exceptions import (
    AccessDenied,
    ForeignKeyViolation,
    InvalidUndo,
    ResourceNotFound,
)
from campaignos.models import (
    Activity,
    ActivityHistory,
    ActivityType,
    Calendar,
    Campaign,
    HistoryAction,
    Swimlane,
    Vendor,
)
from campaignos.schemas.activity import ActivitySnapshot
from campaignos.services.history import record_history, snapshot_activity
from campaignos.services.permissions import (
    Action,
    Principal,
    ResourceKind,
    require_access,
)

logger = logging.getLogger(__name__)

# columns the engine manages itself when restoring
_RESTORE_EXCLUDED = {"id", "created_at", "updated_at"}


def _authorize_undo(
    session: Session,
    principal: Principal,
    activity: Activity | None,
    snapshot: ActivitySnapshot | None,
) -> None:
    if activity is not None:
        calendar_id = activity.calendar_id
    elif snapshot is not None:
        calendar_id = snapshot.calendar_id
    else:
        calendar_id = None

    if calendar_id is None:
        if not principal.is_elevated:
            raise AccessDenied("Forbidden - edit access required")
        return
    require_access(session, principal, Action.EDIT, ResourceKind.CALENDAR, calendar_id)


def _ensure_parents_exist(session: Session, snapshot: ActivitySnapshot) -> None:
    if session.get(Calendar, snapshot.calendar_id) is None:
        raise ForeignKeyViolation("Cannot restore activity: its calendar no longer exists")
    swimlane = session.get(Swimlane, snapshot.swimlane_id)
    if swimlane is None or swimlane.calendar_id != snapshot.calendar_id:
        raise ForeignKeyViolation("Cannot restore activity: its swimlane no longer exists")
    if snapshot.campaign_id is not None and session.get(Campaign, snapshot.campaign_id) is None:
        raise ForeignKeyViolation("Cannot restore activity: its campaign no longer exists")
    if snapshot.type_id is not None and session.get(ActivityType, snapshot.type_id) is None:
        raise ForeignKeyViolation("Cannot restore activity: its activity type no longer exists")
    if snapshot.vendor_id is not None and session.get(Vendor, snapshot.vendor_id) is None:
        raise ForeignKeyViolation("Cannot restore activity: its vendor no longer exists")


def _flush_restored(session: Session) -> None:
    try:
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        raise ForeignKeyViolation(
            "Cannot restore activity: a referenced record no longer exists"
        ) from exc


def _restore_deleted(
    session: Session, entry: ActivityHistory, snapshot: ActivitySnapshot, actor_id: UUID
) -> Activity:
    _ensure_parents_exist(session, snapshot)

    restored = Activity(
        id=entry.activity_id,
        created_at=snapshot.created_at,
        **snapshot.model_dump(exclude=_RESTORE_EXCLUDED),
    )
    restored.touch()
    session.add(restored)
    _flush_restored(session)

    record_history(
        session,
        activity_id=entry.activity_id,
        actor_id=actor_id,
        action=HistoryAction.CREATED,
        changes={"undone": {"old": HistoryAction.DELETED.value, "new": "restored"}},
    )
    return restored


def _overwrite(
    session: Session,
    entry: ActivityHistory,
    activity: Activity,
    snapshot: ActivitySnapshot,
    actor_id: UUID,
) -> Activity:
    _ensure_parents_exist(session, snapshot)

    before = snapshot_activity(activity)
    for field, value in snapshot.model_dump(exclude=_RESTORE_EXCLUDED).items():
        setattr(activity, field, value)
    activity.touch()
    session.add(activity)
    _flush_restored(session)

    record_history(
        session,
        activity_id=activity.id,
        actor_id=actor_id,
        action=HistoryAction.UPDATED,
        previous_state=before,
        changes={"undone": {"old": HistoryAction(entry.action).value, "new": "restored"}},
    )
    return activity


def undo_history_entry(session: Session, principal: Principal, history_id: UUID) -> Activity:
    """Apply the snapshot of ``history_id`` and record the undo.

    Runs inside the caller's transaction; the caller commits.
    """
    entry = session.get(ActivityHistory, history_id)
    if entry is None:
        raise ResourceNotFound("History entry not found")

    activity = session.get(Activity, entry.activity_id)
    snapshot = (
        ActivitySnapshot.model_validate(entry.previous_state)
        if entry.previous_state is not None
        else None
    )

    _authorize_undo(session, principal, activity, snapshot)

    if snapshot is None:
        raise InvalidUndo("Nothing to undo: no previous state available")

    if HistoryAction(entry.action) == HistoryAction.DELETED and activity is None:
        result = _restore_deleted(session, entry, snapshot, principal.id)
        logger.info("User %s restored deleted activity %s", principal.id, entry.activity_id)
        return result

    if activity is None:
        raise ResourceNotFound("Activity no longer exists; undo its deletion first")

    result = _overwrite(session, entry, activity, snapshot, principal.id)
    logger.info(
        "User %s undid %s #%s on activity %s",
        principal.id,
        HistoryAction(entry.action).value,
        entry.sequence,
        entry.activity_id,
    )
    return result
