"""Tests for restoring activities from history entries."""

from uuid import uuid4

import pytest
from sqlmodel import select

from campaignos.core.exceptions import (
    AccessDenied,
    ForeignKeyViolation,
    InvalidUndo,
    ResourceNotFound,
)
from campaignos.models import (
    AccessType,
    Activity,
    ActivityHistory,
    ActivityStatus,
    Campaign,
    HistoryAction,
    Swimlane,
    UserRole,
)
from campaignos.schemas.activity import ActivityUpdate
from campaignos.services.activities import delete_activity, update_activity
from campaignos.services.history import list_history, record_created
from campaignos.services.undo import undo_history_entry

from conftest import principal_of


def _entries(session, activity_id):
    return list_history(session, activity_id, limit=100)


class TestUndoUpdate:
    def test_restores_previous_field_values(self, session, owner, activity):
        principal = principal_of(owner)
        update_activity(
            session,
            principal,
            activity.id,
            ActivityUpdate(title="Webinar (final)", status=ActivityStatus.COMMITTED, cost=2500),
        )
        session.commit()
        entry = _entries(session, activity.id)[0]

        restored = undo_history_entry(session, principal, entry.id)
        session.commit()

        assert restored.title == "Webinar"
        assert restored.status == ActivityStatus.CONSIDERING
        assert restored.cost == 1500

    def test_appends_updated_entry_and_keeps_original(self, session, owner, activity):
        principal = principal_of(owner)
        update_activity(session, principal, activity.id, ActivityUpdate(title="Renamed"))
        session.commit()
        original = _entries(session, activity.id)[0]
        original_state = dict(original.previous_state)

        undo_history_entry(session, principal, original.id)
        session.commit()

        entries = _entries(session, activity.id)
        assert [e.sequence for e in entries] == [2, 1]
        newest = entries[0]
        assert newest.action == HistoryAction.UPDATED
        assert newest.changes == {"undone": {"old": "updated", "new": "restored"}}
        assert newest.previous_state["title"] == "Renamed"
        assert session.get(ActivityHistory, original.id).previous_state == original_state

    def test_undo_is_not_a_toggle(self, session, owner, activity):
        principal = principal_of(owner)
        update_activity(session, principal, activity.id, ActivityUpdate(title="Renamed"))
        session.commit()
        entry = _entries(session, activity.id)[0]

        undo_history_entry(session, principal, entry.id)
        session.commit()
        again = undo_history_entry(session, principal, entry.id)
        session.commit()

        assert again.title == "Webinar"
        assert len(_entries(session, activity.id)) == 3

    def test_undo_overwrites_later_edits(self, session, owner, activity):
        principal = principal_of(owner)
        update_activity(session, principal, activity.id, ActivityUpdate(title="Second"))
        session.commit()
        first_change = _entries(session, activity.id)[0]
        update_activity(session, principal, activity.id, ActivityUpdate(description="later edit"))
        session.commit()

        restored = undo_history_entry(session, principal, first_change.id)
        session.commit()

        assert restored.title == "Webinar"
        assert restored.description == ""

    def test_update_back_to_removed_swimlane_is_a_foreign_key_violation(
        self, session, owner, make_swimlane, calendar, swimlane, activity
    ):
        principal = principal_of(owner)
        other = make_swimlane(calendar, name="Other", sort_order=1)
        update_activity(session, principal, activity.id, ActivityUpdate(swimlane_id=other.id))
        session.commit()
        entry = _entries(session, activity.id)[0]
        session.delete(session.get(Swimlane, swimlane.id))
        session.commit()

        with pytest.raises(ForeignKeyViolation):
            undo_history_entry(session, principal, entry.id)

        session.expire_all()
        assert session.get(Activity, activity.id).swimlane_id == other.id
        assert len(_entries(session, activity.id)) == 1

    def test_update_back_to_removed_campaign_is_a_foreign_key_violation(
        self, session, owner, make_activity, calendar, swimlane, campaign
    ):
        principal = principal_of(owner)
        tagged = make_activity(calendar, swimlane, campaign=campaign)
        update_activity(session, principal, tagged.id, ActivityUpdate(title="Renamed"))
        session.commit()
        entry = _entries(session, tagged.id)[0]
        session.delete(session.get(Campaign, campaign.id))
        session.commit()
        session.expire_all()

        with pytest.raises(ForeignKeyViolation):
            undo_history_entry(session, principal, entry.id)

        session.expire_all()
        restored = session.get(Activity, tagged.id)
        assert restored.title == "Renamed"
        assert restored.campaign_id is None


class TestUndoDelete:
    def test_recreates_with_original_id(self, session, owner, activity):
        principal = principal_of(owner)
        activity_id = activity.id
        created_at = activity.created_at
        delete_activity(session, principal, activity_id)
        session.commit()
        entry = _entries(session, activity_id)[0]

        restored = undo_history_entry(session, principal, entry.id)
        session.commit()

        assert restored.id == activity_id
        assert restored.title == "Webinar"
        assert restored.created_at == created_at
        assert session.get(Activity, activity_id) is not None

        newest = _entries(session, activity_id)[0]
        assert newest.action == HistoryAction.CREATED
        assert newest.previous_state is None
        assert newest.changes == {"undone": {"old": "deleted", "new": "restored"}}

    def test_missing_swimlane_is_a_foreign_key_violation(
        self, session, owner, make_swimlane, make_activity, calendar
    ):
        principal = principal_of(owner)
        lane = make_swimlane(calendar, name="Temporary")
        doomed = make_activity(calendar, lane)
        activity_id = doomed.id
        delete_activity(session, principal, activity_id)
        session.commit()
        entry = _entries(session, activity_id)[0]
        session.delete(session.get(Swimlane, lane.id))
        session.commit()

        with pytest.raises(ForeignKeyViolation):
            undo_history_entry(session, principal, entry.id)

        assert session.get(Activity, activity_id) is None
        assert len(_entries(session, activity_id)) == 1

    def test_missing_calendar_is_reported(self, session, make_user, activity, calendar):
        manager = principal_of(make_user(role=UserRole.MANAGER))
        activity_id = activity.id
        delete_activity(session, manager, activity_id)
        session.commit()
        entry = _entries(session, activity_id)[0]
        session.delete(calendar)
        session.commit()

        with pytest.raises(ForeignKeyViolation):
            undo_history_entry(session, manager, entry.id)


class TestUndoRejections:
    def test_unknown_entry(self, session, owner):
        with pytest.raises(ResourceNotFound):
            undo_history_entry(session, principal_of(owner), uuid4())

    def test_created_entry_has_nothing_to_undo(self, session, owner, activity):
        entry = record_created(session, activity, owner.id)
        session.commit()

        with pytest.raises(InvalidUndo):
            undo_history_entry(session, principal_of(owner), entry.id)

        assert len(_entries(session, activity.id)) == 1
        assert session.get(Activity, activity.id).title == "Webinar"

    def test_viewer_cannot_undo(self, session, owner, make_user, calendar, activity, grant_calendar):
        update_activity(session, principal_of(owner), activity.id, ActivityUpdate(title="Renamed"))
        session.commit()
        entry = _entries(session, activity.id)[0]
        viewer = make_user()
        grant_calendar(calendar, viewer, AccessType.VIEW)

        with pytest.raises(AccessDenied):
            undo_history_entry(session, principal_of(viewer), entry.id)

        assert session.get(Activity, activity.id).title == "Renamed"


class TestScenarios:
    def test_scenario_viewer_denied_owner_updates_and_undoes(
        self, session, owner, make_user, calendar, activity, grant_calendar
    ):
        viewer = make_user()
        grant_calendar(calendar, viewer, AccessType.VIEW)

        with pytest.raises(AccessDenied):
            update_activity(
                session,
                principal_of(viewer),
                activity.id,
                ActivityUpdate(status=ActivityStatus.COMMITTED),
            )
        session.rollback()
        assert _entries(session, activity.id) == []

        update_activity(
            session, principal_of(owner), activity.id, ActivityUpdate(status=ActivityStatus.COMMITTED)
        )
        session.commit()
        update_entry = _entries(session, activity.id)[0]
        assert update_entry.changes == {"status": {"old": "Considering", "new": "Committed"}}

        restored = undo_history_entry(session, principal_of(owner), update_entry.id)
        session.commit()

        assert restored.status == ActivityStatus.CONSIDERING
        entries = _entries(session, activity.id)
        assert [e.action for e in entries] == [HistoryAction.UPDATED, HistoryAction.UPDATED]
        assert entries[0].changes == {"undone": {"old": "updated", "new": "restored"}}

    def test_scenario_manager_deletes_stranger_denied_manager_restores(
        self, session, make_user, activity
    ):
        manager = principal_of(make_user(role=UserRole.MANAGER))
        stranger = principal_of(make_user())
        activity_id = activity.id

        delete_activity(session, manager, activity_id)
        session.commit()
        entry = _entries(session, activity_id)[0]

        with pytest.raises(AccessDenied):
            undo_history_entry(session, stranger, entry.id)
        assert session.get(Activity, activity_id) is None

        restored = undo_history_entry(session, manager, entry.id)
        session.commit()

        assert restored.id == activity_id
        rows = session.exec(select(Activity).where(Activity.id == activity_id)).all()
        assert len(rows) == 1
