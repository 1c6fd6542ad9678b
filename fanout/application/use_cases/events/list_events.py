"""Use cases for inspecting recorded events."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from fanout.domain.entities import Event
from fanout.domain.exceptions import EventNotFoundError
from fanout.infrastructure.repositories import EventRepository

from .validators import ensure_valid_event_type


def list_events(
    session: Session,
    *,
    event_type: str | None = None,
    processed: bool | None = None,
    limit: int = 100,
) -> Sequence[Event]:
    normalized = ensure_valid_event_type(event_type) if event_type else None
    return EventRepository(session).list(
        event_type=normalized, processed=processed, limit=limit
    )


def list_user_events(
    session: Session, user_id: str, *, event_type: str | None = None, limit: int = 50
) -> Sequence[Event]:
    """Return events where ``user_id`` acted or was targeted, newest first."""

    normalized = ensure_valid_event_type(event_type) if event_type else None
    return EventRepository(session).list_for_user(
        user_id, event_type=normalized, limit=limit
    )


def get_event_stats(session: Session) -> list[dict[str, object]]:
    return EventRepository(session).stats_by_type()


def get_event(session: Session, event_id: str) -> Event:
    event = EventRepository(session).get(event_id)
    if event is None:
        raise EventNotFoundError(f"Event {event_id} not found")
    return event


def delete_event(session: Session, event_id: str) -> None:
    """Delete an event; notifications it produced are kept."""

    if not EventRepository(session).delete(event_id):
        raise EventNotFoundError(f"Event {event_id} not found")
