import os
import uuid
from datetime import date, datetime, timedelta, timezone

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["NOTIFICATIONS_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from kombu.exceptions import OperationalError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.core.security import create_access_token
from app.models.match_db import match_crud  # noqa: F401  registers every table on Base
from app.models.profile_db.partner_preferences_db import PartnerPreferences
from app.models.profile_db.profile_db import UserProfile
from app.routes.match.match_routers import get_matchmaking_service
from app.services.matching_config import HardFilters, MatchWeights
from app.services.matchmaking_service import MatchmakingService
from app.services.pair_locks import PairLockRegistry
from main import app

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Starts at NOW and moves one second forward on every read."""

    def __init__(self, start=NOW):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class FakeNotifier:
    """Stands in for the Celery task; records .delay() calls."""

    def __init__(self, broker_down=False):
        self.broker_down = broker_down
        self.calls = []

    def delay(self, *args):
        if self.broker_down:
            raise OperationalError("Error 111 connecting to localhost:6379. Connection refused.")
        self.calls.append(args)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_profile(db):
    def _make_profile(is_bride=False, **fields):
        fields.setdefault("full_name", f"Profile {uuid.uuid4().hex[:6]}")
        fields.setdefault("email", f"{uuid.uuid4().hex[:8]}@example.com")
        fields.setdefault("date_of_birth", date(1996, 5, 20))
        fields.setdefault("height_cm", 165)
        fields.setdefault("last_login", NOW - timedelta(hours=1))
        profile = UserProfile(user_id=uuid.uuid4(), is_bride=is_bride, **fields)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make_profile


@pytest.fixture
def make_preferences(db):
    def _make_preferences(profile, **fields):
        preferences = PartnerPreferences(user_profile_id=profile.id, **fields)
        db.add(preferences)
        db.commit()
        db.refresh(preferences)
        return preferences

    return _make_preferences


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def service(db, notifier):
    return MatchmakingService(
        db,
        weights=MatchWeights(),
        hard_filters=HardFilters(),
        notifier=notifier,
        locks=PairLockRegistry(),
        clock=FakeClock(),
    )


@pytest.fixture
def client(service):
    app.dependency_overrides[get_matchmaking_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id):
    token = create_access_token({"user_id": str(user_id)})
    return {"Authorization": f"Bearer {token}"}
