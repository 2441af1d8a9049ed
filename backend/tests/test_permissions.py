"""Tests for access resolution and the authorization gate."""

from uuid import uuid4

import pytest
from sqlmodel import select

from campaignos.core.exceptions import AccessDenied
from campaignos.models import AccessType, Calendar, UserRole
from campaignos.services.permissions import (
    AccessLevel,
    Action,
    Allowed,
    Denied,
    ResourceKind,
    accessible_calendars_condition,
    authorize,
    level_for_access_type,
    require_access,
    resolve_access,
    root_calendar_id,
)

from conftest import principal_of


class TestResolveAccess:
    """Effective access level per principal and resource."""

    @pytest.mark.parametrize("role", [UserRole.MANAGER, UserRole.ADMIN])
    def test_elevated_roles_resolve_to_owner_everywhere(
        self, session, make_user, calendar, swimlane, campaign, activity, role
    ):
        principal = principal_of(make_user(role=role))

        for kind, resource_id in [
            (ResourceKind.CALENDAR, calendar.id),
            (ResourceKind.SWIMLANE, swimlane.id),
            (ResourceKind.CAMPAIGN, campaign.id),
            (ResourceKind.ACTIVITY, activity.id),
        ]:
            assert resolve_access(session, principal, kind, resource_id) == AccessLevel.OWNER

    def test_elevated_role_ignores_restrictive_grant(
        self, session, make_user, calendar, grant_calendar
    ):
        manager = make_user(role=UserRole.MANAGER)
        grant_calendar(calendar, manager, AccessType.VIEW)

        level = resolve_access(session, principal_of(manager), ResourceKind.CALENDAR, calendar.id)

        assert level == AccessLevel.OWNER

    def test_owner_without_any_grant_rows(self, session, owner, calendar, activity):
        principal = principal_of(owner)

        assert resolve_access(session, principal, ResourceKind.CALENDAR, calendar.id) == AccessLevel.OWNER
        assert resolve_access(session, principal, ResourceKind.ACTIVITY, activity.id) == AccessLevel.OWNER

    @pytest.mark.parametrize(
        "access_type, expected",
        [
            (AccessType.EDIT, AccessLevel.EDIT),
            (AccessType.VIEW, AccessLevel.VIEW),
            (AccessType.COPY, AccessLevel.VIEW),
        ],
    )
    def test_calendar_grant_levels(
        self, session, make_user, calendar, swimlane, activity, grant_calendar, access_type, expected
    ):
        user = make_user()
        grant_calendar(calendar, user, access_type)
        principal = principal_of(user)

        assert resolve_access(session, principal, ResourceKind.CALENDAR, calendar.id) == expected
        assert resolve_access(session, principal, ResourceKind.SWIMLANE, swimlane.id) == expected
        assert resolve_access(session, principal, ResourceKind.ACTIVITY, activity.id) == expected

    def test_stranger_has_no_access(self, session, make_user, calendar, activity):
        principal = principal_of(make_user())

        assert resolve_access(session, principal, ResourceKind.CALENDAR, calendar.id) == AccessLevel.NONE
        assert resolve_access(session, principal, ResourceKind.ACTIVITY, activity.id) == AccessLevel.NONE

    def test_missing_resource_resolves_to_none(self, session, owner):
        principal = principal_of(owner)

        assert resolve_access(session, principal, ResourceKind.ACTIVITY, uuid4()) == AccessLevel.NONE
        assert resolve_access(session, principal, ResourceKind.CAMPAIGN, uuid4()) == AccessLevel.NONE

    def test_campaign_grant_is_scoped_to_that_campaign(
        self, session, make_user, make_campaign, calendar, campaign, activity, grant_campaign
    ):
        user = make_user()
        grant_campaign(campaign, user, AccessType.EDIT)
        other_campaign = make_campaign(calendar, name="Autumn Push")
        principal = principal_of(user)

        assert resolve_access(session, principal, ResourceKind.CAMPAIGN, campaign.id) == AccessLevel.EDIT
        assert resolve_access(session, principal, ResourceKind.CAMPAIGN, other_campaign.id) == AccessLevel.NONE
        assert resolve_access(session, principal, ResourceKind.CALENDAR, calendar.id) == AccessLevel.NONE
        assert resolve_access(session, principal, ResourceKind.ACTIVITY, activity.id) == AccessLevel.NONE

    def test_campaign_grant_overrides_calendar_grant(
        self, session, make_user, calendar, campaign, grant_calendar, grant_campaign
    ):
        user = make_user()
        grant_calendar(calendar, user, AccessType.EDIT)
        grant_campaign(campaign, user, AccessType.VIEW)

        level = resolve_access(session, principal_of(user), ResourceKind.CAMPAIGN, campaign.id)

        assert level == AccessLevel.VIEW

    def test_campaign_falls_back_to_calendar_grant(
        self, session, make_user, calendar, campaign, grant_calendar
    ):
        user = make_user()
        grant_calendar(calendar, user, AccessType.EDIT)

        level = resolve_access(session, principal_of(user), ResourceKind.CAMPAIGN, campaign.id)

        assert level == AccessLevel.EDIT

    def test_calendar_owner_owns_campaigns(self, session, owner, campaign):
        level = resolve_access(session, principal_of(owner), ResourceKind.CAMPAIGN, campaign.id)

        assert level == AccessLevel.OWNER

    def test_root_calendar_id(self, session, calendar, swimlane, campaign, activity):
        assert root_calendar_id(session, ResourceKind.CALENDAR, calendar.id) == calendar.id
        assert root_calendar_id(session, ResourceKind.SWIMLANE, swimlane.id) == calendar.id
        assert root_calendar_id(session, ResourceKind.CAMPAIGN, campaign.id) == calendar.id
        assert root_calendar_id(session, ResourceKind.ACTIVITY, activity.id) == calendar.id
        assert root_calendar_id(session, ResourceKind.ACTIVITY, uuid4()) is None

    def test_level_for_access_type_accepts_strings(self):
        assert level_for_access_type("edit") == AccessLevel.EDIT
        assert level_for_access_type("copy") == AccessLevel.VIEW


class TestAuthorize:
    """Allow/deny decisions per action."""

    def test_editor_may_edit_but_not_delete_calendar(
        self, session, make_user, calendar, grant_calendar
    ):
        editor = make_user()
        grant_calendar(calendar, editor, AccessType.EDIT)
        principal = principal_of(editor)

        edit = authorize(session, principal, Action.EDIT, ResourceKind.CALENDAR, calendar.id)
        delete = authorize(session, principal, Action.DELETE, ResourceKind.CALENDAR, calendar.id)

        assert edit == Allowed(level=AccessLevel.EDIT)
        assert isinstance(delete, Denied)
        assert not delete
        assert delete.level == AccessLevel.EDIT
        assert delete.reason == "Only the owner can delete this calendar"

    def test_owner_and_manager_may_delete_calendar(self, session, make_user, owner, calendar):
        manager = make_user(role=UserRole.MANAGER)

        assert authorize(session, principal_of(owner), Action.DELETE, ResourceKind.CALENDAR, calendar.id)
        assert authorize(session, principal_of(manager), Action.DELETE, ResourceKind.CALENDAR, calendar.id)

    def test_viewer_denied_edit(self, session, make_user, calendar, activity, grant_calendar):
        viewer = make_user()
        grant_calendar(calendar, viewer, AccessType.VIEW)

        decision = authorize(session, principal_of(viewer), Action.EDIT, ResourceKind.ACTIVITY, activity.id)

        assert isinstance(decision, Denied)
        assert decision.reason == "Forbidden - edit access required"

    def test_copy_grant_reads_like_view(self, session, make_user, calendar, grant_calendar):
        user = make_user()
        grant_calendar(calendar, user, AccessType.COPY)
        principal = principal_of(user)

        assert authorize(session, principal, Action.VIEW, ResourceKind.CALENDAR, calendar.id)
        assert not authorize(session, principal, Action.EDIT, ResourceKind.CALENDAR, calendar.id)

    def test_share_requires_owner_level(
        self, session, make_user, calendar, campaign, grant_calendar, grant_campaign
    ):
        editor = make_user()
        grant_calendar(calendar, editor, AccessType.EDIT)
        grant_campaign(campaign, editor, AccessType.EDIT)
        principal = principal_of(editor)

        assert not authorize(session, principal, Action.SHARE, ResourceKind.CALENDAR, calendar.id)
        assert not authorize(session, principal, Action.SHARE, ResourceKind.CAMPAIGN, campaign.id)

    def test_authorize_has_no_side_effects(self, session, make_user, calendar):
        stranger = make_user()
        before = session.exec(select(Calendar)).all()

        authorize(session, principal_of(stranger), Action.DELETE, ResourceKind.CALENDAR, calendar.id)

        assert session.exec(select(Calendar)).all() == before
        assert not session.new and not session.dirty and not session.deleted

    def test_require_access_raises(self, session, make_user, calendar):
        with pytest.raises(AccessDenied) as exc_info:
            require_access(session, principal_of(make_user()), Action.VIEW, ResourceKind.CALENDAR, calendar.id)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Forbidden - view access required"

    def test_require_access_returns_level(self, session, owner, calendar):
        level = require_access(session, principal_of(owner), Action.VIEW, ResourceKind.CALENDAR, calendar.id)

        assert level == AccessLevel.OWNER


class TestAccessibleCalendars:
    def test_lists_owned_and_shared_only(self, session, make_user, make_calendar, grant_calendar):
        user = make_user()
        other = make_user()
        own = make_calendar(user, name="Mine")
        shared = make_calendar(other, name="Shared")
        make_calendar(other, name="Private")
        grant_calendar(shared, user, AccessType.VIEW)

        rows = session.exec(
            select(Calendar).where(accessible_calendars_condition(principal_of(user)))
        ).all()

        assert {c.id for c in rows} == {own.id, shared.id}

    def test_admin_sees_everything(self, session, make_user, make_calendar):
        other = make_user()
        make_calendar(other, name="One")
        make_calendar(other, name="Two")
        admin = make_user(role=UserRole.ADMIN)

        rows = session.exec(
            select(Calendar).where(accessible_calendars_condition(principal_of(admin)))
        ).all()

        assert len(rows) == 2
