"""Shared fixtures: in-memory database, API client and data factories."""

import os

# configure before campaignos.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFICATIONS_PUBLISH_ENABLED", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

import campaignos.models  # noqa: E402,F401
from campaignos.core.limiter import limiter  # noqa: E402
from campaignos.core.security import create_access_token  # noqa: E402
from campaignos.db import enable_sqlite_foreign_keys, get_session  # noqa: E402
from campaignos.main import app  # noqa: E402
from campaignos.models import (  # noqa: E402
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
from campaignos.services import notifications  # noqa: E402
from campaignos.services.permissions import Principal  # noqa: E402


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    """API client sharing the test session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def published(monkeypatch):
    """Capture notifications that would be pushed to Redis."""
    sent = []
    monkeypatch.setattr(notifications, "publish_notification", sent.append)
    return sent


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def make_user(session):
    def _make_user(role=UserRole.USER, name=None, email=None, hashed_password="not-a-real-hash"):
        suffix = uuid4().hex[:8]
        user = User(
            email=email or f"user-{suffix}@example.com",
            name=name or f"User {suffix}",
            hashed_password=hashed_password,
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_calendar(session):
    def _make_calendar(owner, name="Marketing 2025"):
        calendar = Calendar(name=name, owner_id=owner.id)
        session.add(calendar)
        session.commit()
        session.refresh(calendar)
        return calendar

    return _make_calendar


@pytest.fixture
def make_swimlane(session):
    def _make_swimlane(calendar, name="Events", sort_order=0):
        swimlane = Swimlane(name=name, calendar_id=calendar.id, sort_order=sort_order)
        session.add(swimlane)
        session.commit()
        session.refresh(swimlane)
        return swimlane

    return _make_swimlane


@pytest.fixture
def make_campaign(session):
    def _make_campaign(calendar, name="Spring Launch"):
        campaign = Campaign(name=name, calendar_id=calendar.id)
        session.add(campaign)
        session.commit()
        session.refresh(campaign)
        return campaign

    return _make_campaign


@pytest.fixture
def make_activity(session):
    def _make_activity(calendar, swimlane, campaign=None, **overrides):
        fields = {
            "title": "Webinar",
            "start_date": date(2025, 3, 1),
            "end_date": date(2025, 3, 2),
            "cost": 1500,
            "expected_saos": 10,
        }
        fields.update(overrides)
        activity = Activity(
            calendar_id=calendar.id,
            swimlane_id=swimlane.id,
            campaign_id=campaign.id if campaign else None,
            **fields,
        )
        session.add(activity)
        session.commit()
        session.refresh(activity)
        return activity

    return _make_activity


@pytest.fixture
def grant_calendar(session):
    def _grant(calendar, user, access_type=AccessType.VIEW):
        permission = CalendarPermission(
            calendar_id=calendar.id, user_id=user.id, access_type=access_type
        )
        session.add(permission)
        session.commit()
        session.refresh(permission)
        return permission

    return _grant


@pytest.fixture
def grant_campaign(session):
    def _grant(campaign, user, access_type=AccessType.VIEW, invited_by=None):
        permission = CampaignPermission(
            campaign_id=campaign.id,
            user_id=user.id,
            access_type=access_type,
            invited_by=invited_by,
        )
        session.add(permission)
        session.commit()
        session.refresh(permission)
        return permission

    return _grant


@pytest.fixture
def owner(make_user):
    return make_user(name="Olivia Owner")


@pytest.fixture
def calendar(make_calendar, owner):
    return make_calendar(owner)


@pytest.fixture
def swimlane(make_swimlane, calendar):
    return make_swimlane(calendar)


@pytest.fixture
def campaign(make_campaign, calendar):
    return make_campaign(calendar)


@pytest.fixture
def activity(make_activity, calendar, swimlane):
    return make_activity(calendar, swimlane)


def principal_of(user):
    return Principal.from_user(user)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
