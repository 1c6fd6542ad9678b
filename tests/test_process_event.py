"""Tests for the event processor, deduplication gate and recovery sweep."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from fanout.application.use_cases.notifications import (
    process_event,
    recover_unprocessed_events,
)
from fanout.domain.entities import GeneratedNotification
from fanout.domain.exceptions import EventNotFoundError, SourceUserNotFoundError
from fanout.infrastructure.models import EventModel
from fanout.infrastructure.repositories import (
    EventRepository,
    NotificationRepository,
)
from fanout.utils import to_storage_datetime

from .conftest import NOW


def _notifications_for(session, user_id):
    return NotificationRepository(session).list_for_user(user_id, limit=100)


def test_follow_notifies_followed_user(session, make_user, make_event):
    make_user("u1", "alice")
    make_user("u2", "bruno")
    event = make_event("FOLLOW", "u2", "u1")

    written = process_event(session, event.event_id, now=NOW)

    assert len(written) == 1
    notification = written[0]
    assert notification.user_id == "u1"
    assert notification.type == "FOLLOW"
    assert notification.status == "unread"
    assert "bruno" in notification.content
    assert notification.data.url == "http://localhost:3000/profile/u2"
    assert notification.related_event_id == event.event_id
    assert notification.expires_at == NOW + timedelta(days=30)

    stored = EventRepository(session).get(event.event_id)
    assert stored.processed is True
    assert stored.notifications_generated == [
        GeneratedNotification(notification_id=notification.notification_id, user_id="u1")
    ]


def test_mention_skips_the_author(session, make_user, make_event):
    for user_id in ("u1", "u2", "u3"):
        make_user(user_id)
    event = make_event("MENTION", "u2", mentioned_users=["u1", "u2", "u3"], post_id="p1")

    written = process_event(session, event.event_id, now=NOW)

    assert sorted(item.user_id for item in written) == ["u1", "u3"]
    assert _notifications_for(session, "u2") == []


@pytest.mark.parametrize("event_type", ["LIKE", "COMMENT", "SHARE"])
def test_actions_on_own_post_produce_nothing(session, make_user, make_event, event_type):
    make_user("u1", notification_types=["LIKE", "COMMENT", "SHARE"])
    event = make_event(event_type, "u1", "u1", post_id="p1")

    assert process_event(session, event.event_id, now=NOW) == []
    assert EventRepository(session).get(event.event_id).processed is True


def test_post_create_notifies_subscribed_followers(session, make_user, make_event):
    make_user("u1")
    make_user("u2", following=("u1",))
    make_user("u3", following=("u1",))
    make_user("u4", notification_types=["LIKE"], following=("u1",))
    make_user("u5")
    event = make_event("POST_CREATE", "u1", post_id="p7")

    written = process_event(session, event.event_id, now=NOW)

    assert [item.user_id for item in written] == ["u2", "u3"]
    assert all(item.data.url == "http://localhost:3000/posts/p7" for item in written)


def test_duplicate_like_within_window_is_suppressed(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    first = make_event("LIKE", "u2", "u1", post_id="p1")
    second = make_event("LIKE", "u2", "u1", post_id="p1")

    assert len(process_event(session, first.event_id, now=NOW)) == 1
    assert process_event(session, second.event_id, now=NOW + timedelta(minutes=4)) == []

    assert len(_notifications_for(session, "u1")) == 1
    assert EventRepository(session).get(second.event_id).processed is True


def test_duplicate_like_outside_window_fires_again(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    first = make_event("LIKE", "u2", "u1", post_id="p1")
    second = make_event("LIKE", "u2", "u1", post_id="p1")

    process_event(session, first.event_id, now=NOW)
    process_event(session, second.event_id, now=NOW + timedelta(minutes=6))

    assert len(_notifications_for(session, "u1")) == 2


def test_likes_on_different_posts_are_not_duplicates(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    process_event(session, make_event("LIKE", "u2", "u1", post_id="p1").event_id, now=NOW)
    process_event(session, make_event("LIKE", "u2", "u1", post_id="p2").event_id, now=NOW)

    assert len(_notifications_for(session, "u1")) == 2


def test_processed_event_is_not_reprocessed(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    event = make_event("FOLLOW", "u2", "u1")
    process_event(session, event.event_id, now=NOW)

    report = recover_unprocessed_events(session)

    assert report.found == 0
    assert process_event(session, event.event_id, now=NOW + timedelta(hours=1)) == []
    assert len(_notifications_for(session, "u1")) == 1
    assert EventRepository(session).get(event.event_id).processing_attempts == 1


def test_missing_source_user_leaves_event_unprocessed(session, make_user, make_event):
    make_user("u1")
    event = make_event("LIKE", "ghost", "u1", post_id="p1")

    with pytest.raises(SourceUserNotFoundError):
        process_event(session, event.event_id, now=NOW)

    stored = EventRepository(session).get(event.event_id)
    assert stored.processed is False
    assert stored.processing_attempts == 1
    assert _notifications_for(session, "u1") == []


def test_unknown_event_id_raises(session):
    with pytest.raises(EventNotFoundError):
        process_event(session, "missing")


def test_missing_recipient_does_not_block_others(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    event = make_event("MENTION", "u2", mentioned_users=["ghost", "u1"])

    written = process_event(session, event.event_id, now=NOW)

    assert [item.user_id for item in written] == ["u1"]
    assert EventRepository(session).get(event.event_id).processed is True


def test_recipient_write_failure_is_isolated(session, make_user, make_event, monkeypatch):
    for user_id in ("u1", "u2", "u3"):
        make_user(user_id)
    event = make_event("MENTION", "u2", mentioned_users=["u3", "u1"])
    original_create = NotificationRepository.create

    def flaky_create(self, notification):
        if notification.user_id == "u3":
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))
        return original_create(self, notification)

    monkeypatch.setattr(NotificationRepository, "create", flaky_create)

    written = process_event(session, event.event_id, now=NOW)

    assert [item.user_id for item in written] == ["u1"]
    stored = EventRepository(session).get(event.event_id)
    assert stored.processed is True
    assert [item.user_id for item in stored.notifications_generated] == ["u1"]


def test_recovery_after_failed_marking_does_not_duplicate(
    session, make_user, make_event, monkeypatch
):
    make_user("u1")
    make_user("u2")
    make_user("u3")
    event = make_event("MENTION", "u2", mentioned_users=["u1", "u3"], post_id="p1")

    def failing_mark(self, event_id, generated):
        raise OperationalError("UPDATE", {}, Exception("connection lost"))

    with monkeypatch.context() as patch:
        patch.setattr(EventRepository, "mark_processed", failing_mark)
        with pytest.raises(OperationalError):
            process_event(session, event.event_id, now=NOW)
    session.rollback()

    assert EventRepository(session).get(event.event_id).processed is False
    assert len(_notifications_for(session, "u1")) == 1

    report = recover_unprocessed_events(session)

    assert report.found == 1
    assert report.processed == 1
    assert report.notifications_created == 0
    assert len(_notifications_for(session, "u1")) == 1
    assert len(_notifications_for(session, "u3")) == 1
    assert EventRepository(session).get(event.event_id).processed is True


def test_recovery_processes_oldest_first(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    newer = make_event("LIKE", "u2", "u1", post_id="p2")
    older = make_event("FOLLOW", "u2", "u1")
    session.get(EventModel, older.event_id).timestamp = to_storage_datetime(
        NOW - timedelta(hours=1)
    )
    session.commit()
    repository = EventRepository(session)

    unprocessed = repository.list_unprocessed()

    assert [item.event_id for item in unprocessed] == [older.event_id, newer.event_id]

    report = recover_unprocessed_events(session)
    assert report.processed == 2
    assert report.notifications_created == 2


def test_recovery_gives_up_after_max_attempts(session, make_user, make_event):
    make_user("u1")
    event = make_event("LIKE", "ghost", "u1", post_id="p1")

    first = recover_unprocessed_events(session, max_attempts=2)
    second = recover_unprocessed_events(session, max_attempts=2)
    third = recover_unprocessed_events(session, max_attempts=2)

    assert first.failed_event_ids == [event.event_id]
    assert second.failed_event_ids == [event.event_id]
    assert third.found == 0
    assert third.exhausted == 1
    assert EventRepository(session).get(event.event_id).processing_attempts == 2


def test_recovery_stops_at_deadline(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    make_event("FOLLOW", "u2", "u1")

    report = recover_unprocessed_events(session, timeout_seconds=0)

    assert report.timed_out is True
    assert report.processed == 0
    assert len(EventRepository(session).list_unprocessed()) == 1


def test_event_leased_by_another_worker_is_skipped(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    event = make_event("FOLLOW", "u2", "u1")
    repository = EventRepository(session)
    assert repository.claim(event.event_id, now=NOW, lease=timedelta(minutes=5)) is True

    assert process_event(session, event.event_id, now=NOW + timedelta(minutes=1)) == []
    assert _notifications_for(session, "u1") == []
    assert repository.get(event.event_id).processed is False

    written = process_event(session, event.event_id, now=NOW + timedelta(minutes=6))

    assert len(written) == 1
    stored = repository.get(event.event_id)
    assert stored.processed is True
    assert stored.processing_attempts == 2
    assert stored.processing_started_at is None


def test_failed_attempt_releases_the_lease(session, make_user, make_event):
    make_user("u1")
    event = make_event("LIKE", "ghost", "u1", post_id="p1")

    with pytest.raises(SourceUserNotFoundError):
        process_event(session, event.event_id, now=NOW)

    assert EventRepository(session).get(event.event_id).processing_started_at is None
