"""Shared fixtures: a throwaway SQLite database and small factories."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="fanout-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_DIR / 'test.db'}"
os.environ["FRONTEND_URL"] = "http://localhost:3000"
os.environ["RECOVERY_ON_STARTUP"] = "false"
os.environ["MAINTENANCE_INTERVAL_SECONDS"] = "0"

from fanout.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from fanout.application.use_cases.events import create_event  # noqa: E402
from fanout.domain.entities import User, UserPreferences  # noqa: E402
from fanout.infrastructure import database  # noqa: E402
from fanout.infrastructure.repositories import UserRepository  # noqa: E402

# Real wall clock: the recovery sweep measures the dedup window against it.
NOW = datetime.now(tz=timezone.utc).replace(microsecond=0)


@pytest.fixture(autouse=True)
def clean_database():
    """Recreate every table so each test starts empty."""

    from fanout.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture()
def session(clean_database):
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(session):
    """Create a user, optionally with custom subscriptions and follow edges."""

    repository = UserRepository(session)

    def _make(
        user_id: str,
        username: str | None = None,
        *,
        notification_types: list[str] | None = None,
        following: tuple[str, ...] = (),
    ) -> User:
        preferences = UserPreferences()
        if notification_types is not None:
            preferences.notification_types = list(notification_types)
        username = username or f"user_{user_id}"
        repository.create(
            User(
                user_id=user_id,
                username=username,
                email=f"{username}@example.com",
                preferences=preferences,
            )
        )
        for followee_id in following:
            repository.follow(user_id, followee_id)
        return repository.get(user_id)

    return _make


@pytest.fixture()
def make_event(session):
    def _make(event_type: str, source_user_id: str, target_user_id: str | None = None, **data):
        return create_event(
            session,
            event_type=event_type,
            source_user_id=source_user_id,
            target_user_id=target_user_id,
            data=data,
            now=NOW,
        )

    return _make


@pytest.fixture()
def anyio_backend():
    return "asyncio"
