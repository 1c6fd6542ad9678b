"""Deduplication gate and notification writer."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from fanout.config import Settings, get_settings
from fanout.domain.entities import (
    NOTIFICATION_STATUS_UNREAD,
    Event,
    Notification,
    NotificationData,
    User,
)
from fanout.infrastructure.repositories import NotificationRepository

from .content import build_notification_url, render_notification_content

logger = logging.getLogger(__name__)


def find_recent_duplicate(
    repository: NotificationRepository,
    event: Event,
    recipient_id: str,
    *,
    now: datetime,
    window: timedelta,
) -> Notification | None:
    """Return an equivalent notification created within ``window`` before ``now``.

    Equivalence is (recipient, source user, type, post). The window is measured
    against processing time, not the event timestamp.
    """

    return repository.find_recent_duplicate(
        user_id=recipient_id,
        source_user_id=event.source_user_id,
        notification_type=event.type,
        post_id=event.data.post_id,
        since=now - window,
    )


def build_notification(
    event: Event,
    source_user: User,
    recipient_id: str,
    *,
    now: datetime,
    settings: Settings,
) -> Notification:
    return Notification(
        notification_id=str(uuid.uuid4()),
        user_id=recipient_id,
        type=event.type,
        content=render_notification_content(event, source_user.username),
        source_user_id=source_user.user_id,
        related_event_id=event.event_id,
        data=NotificationData(
            post_id=event.data.post_id,
            comment_id=event.data.comment_id,
            url=build_notification_url(event, settings.frontend_url),
            metadata=dict(event.data.metadata),
        ),
        status=NOTIFICATION_STATUS_UNREAD,
        timestamp=now,
        expires_at=now + timedelta(days=settings.notification_retention_days),
    )


def write_notification(
    repository: NotificationRepository,
    event: Event,
    source_user: User,
    recipient: User,
    *,
    now: datetime,
    settings: Settings | None = None,
) -> Notification | None:
    """Persist a notification for ``recipient`` unless a recent duplicate exists."""

    settings = settings or get_settings()
    window = timedelta(minutes=settings.dedup_window_minutes)
    duplicate = find_recent_duplicate(
        repository, event, recipient.user_id, now=now, window=window
    )
    if duplicate is not None:
        logger.debug(
            "Skipping duplicate %s notification for %s (matches %s)",
            event.type,
            recipient.user_id,
            duplicate.notification_id,
        )
        return None

    notification = build_notification(
        event, source_user, recipient.user_id, now=now, settings=settings
    )
    saved = repository.create(notification)
    logger.info("Created notification for %s: %s", saved.user_id, saved.content)
    return saved


__all__ = ["build_notification", "find_recent_duplicate", "write_notification"]
