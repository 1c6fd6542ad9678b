"""Event processor: drives fan-out of a single event."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from fanout.config import Settings, get_settings
from fanout.domain.entities import Event, GeneratedNotification, Notification
from fanout.domain.exceptions import EventNotFoundError, SourceUserNotFoundError
from fanout.infrastructure.database import SessionLocal
from fanout.infrastructure.repositories import (
    EventRepository,
    NotificationRepository,
    UserRepository,
)
from fanout.utils import utc_now

from .recipients import filter_by_preferences, resolve_candidate_ids
from .writer import write_notification

logger = logging.getLogger(__name__)


def process_event(
    session: Session,
    event_id: str,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> list[Notification]:
    """Fan out the event identified by ``event_id`` and mark it processed.

    Events already processed, or leased by another worker, are left untouched.
    A missing source user raises :class:`SourceUserNotFoundError` and leaves the
    event unprocessed. A failure writing one recipient's notification is logged
    and does not stop the others; only the final processed-marking write
    propagates storage errors.
    """

    settings = settings or get_settings()
    events = EventRepository(session)

    event = events.get(event_id)
    if event is None:
        raise EventNotFoundError(f"Event {event_id} not found")
    if event.processed:
        logger.info("Event %s already processed; skipping", event_id)
        return []

    timestamp = now or utc_now()
    lease = timedelta(seconds=settings.processing_lease_seconds)
    if not events.claim(event_id, now=timestamp, lease=lease):
        logger.info("Event %s is being processed elsewhere; skipping", event_id)
        return []
    logger.info("Processing event %s: %s from %s", event_id, event.type, event.source_user_id)

    try:
        written = _fan_out(session, event, now=timestamp, settings=settings)
        generated = [
            GeneratedNotification(notification_id=item.notification_id, user_id=item.user_id)
            for item in written
        ]
        if not events.mark_processed(event_id, generated):
            logger.warning("Event %s was processed concurrently; keeping first result", event_id)
    except Exception:
        session.rollback()
        events.release(event_id)
        raise
    logger.info("Generated %d notifications for event %s", len(written), event_id)
    return written


def _fan_out(
    session: Session, event: Event, *, now: datetime, settings: Settings
) -> list[Notification]:
    users = UserRepository(session)
    notifications = NotificationRepository(session)

    source_user = users.get(event.source_user_id)
    if source_user is None:
        logger.warning(
            "Source user %s not found for event %s", event.source_user_id, event.event_id
        )
        raise SourceUserNotFoundError(event.event_id, event.source_user_id)

    candidate_ids = resolve_candidate_ids(event, source_user, users)
    recipients = filter_by_preferences(candidate_ids, event.type, users)

    written: list[Notification] = []
    for recipient in recipients:
        try:
            notification = write_notification(
                notifications,
                event,
                source_user,
                recipient,
                now=now,
                settings=settings,
            )
        except Exception:
            session.rollback()
            logger.exception(
                "Error creating notification for user %s from event %s",
                recipient.user_id,
                event.event_id,
            )
            continue
        if notification is not None:
            written.append(notification)
    return written


def process_event_in_new_session(event_id: str) -> list[Notification]:
    """Process ``event_id`` with an independent session, logging every failure."""

    session = SessionLocal()
    try:
        return process_event(session, event_id)
    except (EventNotFoundError, SourceUserNotFoundError) as exc:
        logger.warning("Event %s left unprocessed: %s", event_id, exc)
    except Exception as exc:
        session.rollback()
        logger.exception("Error processing event %s: %s", event_id, exc)
    finally:
        session.close()
    return []


__all__ = ["process_event", "process_event_in_new_session"]
