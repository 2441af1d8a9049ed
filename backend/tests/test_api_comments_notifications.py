"""API tests for activity comments and the notification inbox."""

from campaignos.models import AccessType, NotificationType, RelatedType, UserRole
from campaignos.services.notifications import create_notification

from conftest import auth_headers

API = "/api/v1"


class TestComments:
    def test_viewer_comments_and_owner_is_notified(
        self, client, owner, make_user, calendar, activity, grant_calendar, published
    ):
        viewer = make_user(name="Vic Viewer")
        grant_calendar(calendar, viewer, AccessType.VIEW)

        response = client.post(
            f"{API}/activity-comments/",
            json={"activity_id": str(activity.id), "content": "  Budget looks high  "},
            headers=auth_headers(viewer),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "Budget looks high"
        assert body["user_name"] == "Vic Viewer"
        [notification] = published
        assert notification.user_id == owner.id
        assert notification.type == NotificationType.COMMENT_ADDED
        assert notification.message == 'Vic Viewer commented on "Webinar".'

    def test_owner_commenting_does_not_notify_self(self, client, owner, activity, published):
        client.post(
            f"{API}/activity-comments/",
            json={"activity_id": str(activity.id), "content": "Note to self"},
            headers=auth_headers(owner),
        )

        assert published == []

    def test_stranger_cannot_comment(self, client, make_user, activity):
        response = client.post(
            f"{API}/activity-comments/",
            json={"activity_id": str(activity.id), "content": "hi"},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 403

    def test_only_author_or_admin_edits(self, client, owner, make_user, activity):
        created = client.post(
            f"{API}/activity-comments/",
            json={"activity_id": str(activity.id), "content": "First"},
            headers=auth_headers(owner),
        ).json()
        manager = make_user(role=UserRole.MANAGER)
        admin = make_user(role=UserRole.ADMIN)

        by_manager = client.put(
            f"{API}/activity-comments/{created['id']}",
            json={"content": "Hijacked"},
            headers=auth_headers(manager),
        )
        by_admin = client.put(
            f"{API}/activity-comments/{created['id']}",
            json={"content": "Moderated"},
            headers=auth_headers(admin),
        )

        assert by_manager.status_code == 403
        assert by_admin.status_code == 200
        assert by_admin.json()["content"] == "Moderated"
        assert by_admin.json()["user_id"] == str(owner.id)

    def test_list_and_delete(self, client, owner, activity):
        headers = auth_headers(owner)
        created = client.post(
            f"{API}/activity-comments/",
            json={"activity_id": str(activity.id), "content": "Temporary"},
            headers=headers,
        ).json()

        listed = client.get(
            f"{API}/activity-comments/", params={"activity_id": str(activity.id)}, headers=headers
        )
        assert [c["id"] for c in listed.json()] == [created["id"]]

        deleted = client.delete(f"{API}/activity-comments/{created['id']}", headers=headers)
        assert deleted.status_code == 204

        listed = client.get(
            f"{API}/activity-comments/", params={"activity_id": str(activity.id)}, headers=headers
        )
        assert listed.json() == []


class TestNotifications:
    def _notify(self, session, user, title):
        notification = create_notification(
            session,
            user.id,
            NotificationType.PERMISSION_CHANGED,
            title,
            "message",
            related_type=RelatedType.CALENDAR,
        )
        session.commit()
        return notification

    def test_list_count_and_mark_read(self, client, session, owner, make_user):
        first = self._notify(session, owner, "First")
        self._notify(session, owner, "Second")
        self._notify(session, make_user(), "Someone else's")
        headers = auth_headers(owner)

        listed = client.get(f"{API}/notifications/", headers=headers)
        assert {n["title"] for n in listed.json()} == {"First", "Second"}
        assert client.get(f"{API}/notifications/unread-count", headers=headers).json() == {"count": 2}

        marked = client.patch(
            f"{API}/notifications/{first.id}", json={"is_read": True}, headers=headers
        )
        assert marked.json()["is_read"] is True
        assert marked.json()["read_at"] is not None

        unread = client.get(f"{API}/notifications/", params={"unread_only": True}, headers=headers)
        assert [n["title"] for n in unread.json()] == ["Second"]

        assert client.patch(f"{API}/notifications/mark-all-read", headers=headers).json() == {"marked": 1}
        assert client.get(f"{API}/notifications/unread-count", headers=headers).json() == {"count": 0}

    def test_cannot_touch_other_users_notification(self, client, session, owner, make_user):
        foreign = self._notify(session, make_user(), "Private")

        response = client.patch(
            f"{API}/notifications/{foreign.id}", json={"is_read": True}, headers=auth_headers(owner)
        )

        assert response.status_code == 403
