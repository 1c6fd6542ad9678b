"""Use case for recording a new event."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from fanout.config import get_settings
from fanout.domain.entities import Event, EventData
from fanout.infrastructure.repositories import EventRepository
from fanout.utils import utc_now

from .validators import ensure_mentioned_users, ensure_user_id, ensure_valid_event_type


def create_event(
    session: Session,
    *,
    event_type: str,
    source_user_id: str,
    target_user_id: str | None = None,
    data: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> Event:
    """Validate and persist an unprocessed event; fan-out happens later."""

    payload = data or {}
    metadata = payload.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise ValueError("metadata must be an object")

    timestamp = now or utc_now()
    event = Event(
        event_id=str(uuid.uuid4()),
        type=ensure_valid_event_type(event_type),
        source_user_id=ensure_user_id(source_user_id, field_name="source_user_id"),
        target_user_id=(target_user_id or "").strip() or None,
        data=EventData(
            post_id=payload.get("post_id"),
            comment_id=payload.get("comment_id"),
            content=payload.get("content"),
            mentioned_users=ensure_mentioned_users(payload.get("mentioned_users")),
            metadata=dict(metadata),
        ),
        timestamp=timestamp,
        expires_at=timestamp + timedelta(days=get_settings().event_retention_days),
    )
    return EventRepository(session).create(event)
