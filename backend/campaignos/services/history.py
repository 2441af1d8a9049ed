"""Append-only audit log for activity mutations.

Entries are written in the same transaction as the mutation they describe:
the recorder only adds rows to the session and the caller commits both
together. ``previous_state`` is the authoritative rollback data; ``changes``
is an advisory ``{field: {"old": ..., "new": ...}}`` diff.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from campaignos.models import Activity, ActivityHistory, HistoryAction
from campaignos.schemas.activity import ActivitySnapshot

logger = logging.getLogger(__name__)

# bookkeeping columns left out of diffs
_DIFF_IGNORED_FIELDS = frozenset({"updated_at"})


def snapshot_activity(activity: Activity) -> dict[str, Any]:
    """Return a JSON-ready full copy of the activity row."""
    return ActivitySnapshot.model_validate(activity).model_dump(mode="json")


def diff_snapshots(
    before: Optional[dict[str, Any]], after: Optional[dict[str, Any]]
) -> dict[str, dict[str, Any]]:
    before = before or {}
    after = after or {}
    changes: dict[str, dict[str, Any]] = {}
    for field in sorted(set(before) | set(after)):
        if field in _DIFF_IGNORED_FIELDS:
            continue
        old, new = before.get(field), after.get(field)
        if old != new:
            changes[field] = {"old": old, "new": new}
    return changes


def _next_sequence(session: Session, activity_id: UUID) -> int:
    current = session.exec(
        select(func.max(ActivityHistory.sequence)).where(
            ActivityHistory.activity_id == activity_id
        )
    ).one()
    return (current or 0) + 1


def record_history(
    session: Session,
    *,
    activity_id: UUID,
    actor_id: UUID,
    action: HistoryAction,
    previous_state: Optional[dict[str, Any]] = None,
    changes: Optional[dict[str, Any]] = None,
) -> ActivityHistory:
    action = HistoryAction(action)
    if action != HistoryAction.CREATED and previous_state is None:
        raise ValueError(f"'{action.value}' history entries require a previous state")
    if previous_state is not None:
        # reject snapshots that could not be restored later
        ActivitySnapshot.model_validate(previous_state)

    entry = ActivityHistory(
        activity_id=activity_id,
        user_id=actor_id,
        action=action,
        sequence=_next_sequence(session, activity_id),
        previous_state=previous_state,
        changes=changes,
    )
    session.add(entry)
    logger.debug(
        "Recorded %s #%s for activity %s by %s",
        action.value,
        entry.sequence,
        activity_id,
        actor_id,
    )
    return entry


def record_created(session: Session, activity: Activity, actor_id: UUID) -> ActivityHistory:
    return record_history(
        session,
        activity_id=activity.id,
        actor_id=actor_id,
        action=HistoryAction.CREATED,
        changes=diff_snapshots(None, snapshot_activity(activity)),
    )


def record_updated(
    session: Session,
    before: dict[str, Any],
    activity: Activity,
    actor_id: UUID,
) -> ActivityHistory:
    """Record an update; ``before`` is the snapshot taken prior to the change."""
    return record_history(
        session,
        activity_id=activity.id,
        actor_id=actor_id,
        action=HistoryAction.UPDATED,
        previous_state=before,
        changes=diff_snapshots(before, snapshot_activity(activity)),
    )


def record_deleted(session: Session, activity: Activity, actor_id: UUID) -> ActivityHistory:
    """Record a deletion. Call before the row is removed from the session."""
    return record_history(
        session,
        activity_id=activity.id,
        actor_id=actor_id,
        action=HistoryAction.DELETED,
        previous_state=snapshot_activity(activity),
    )


def list_history(
    session: Session, activity_id: UUID, limit: int = 50
) -> list[ActivityHistory]:
    """Newest entries first."""
    statement = (
        select(ActivityHistory)
        .where(ActivityHistory.activity_id == activity_id)
        .order_by(ActivityHistory.sequence.desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())


def history_calendar_id(session: Session, activity_id: UUID) -> UUID | None:
    """Calendar of an activity, falling back to its last recorded snapshot.

    Lets callers authorize against the history of an activity that has since
    been deleted.
    """
    activity = session.get(Activity, activity_id)
    if activity is not None:
        return activity.calendar_id

    latest = session.exec(
        select(ActivityHistory)
        .where(
            ActivityHistory.activity_id == activity_id,
            ActivityHistory.previous_state.is_not(None),
        )
        .order_by(ActivityHistory.sequence.desc())
        .limit(1)
    ).first()
    if latest is None:
        return None
    return ActivitySnapshot.model_validate(latest.previous_state).calendar_id
