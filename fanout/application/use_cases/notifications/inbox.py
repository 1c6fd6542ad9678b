"""Reader-side operations over a user's stored notifications."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from fanout.domain.entities import NOTIFICATION_STATUSES, Notification
from fanout.domain.exceptions import NotificationNotFoundError
from fanout.infrastructure.repositories import NotificationRepository
from fanout.utils import utc_now

MAX_PAGE_SIZE = 200


def _ensure_valid_status(status: str | None) -> None:
    if status is not None and status not in NOTIFICATION_STATUSES:
        raise ValueError(f"Invalid notification status: {status}")


def list_user_notifications(
    session: Session,
    user_id: str,
    *,
    status: str | None = None,
    types: Iterable[str] | None = None,
    limit: int = 50,
    skip: int = 0,
) -> Sequence[Notification]:
    """Return ``user_id``'s notifications newest first."""

    _ensure_valid_status(status)
    if limit < 1 or skip < 0:
        raise ValueError("limit must be positive and skip non-negative")
    return NotificationRepository(session).list_for_user(
        user_id,
        status=status,
        types=types,
        limit=min(limit, MAX_PAGE_SIZE),
        skip=skip,
    )


def get_unread_count(session: Session, user_id: str) -> int:
    """Return how many of ``user_id``'s notifications are still unread."""

    return NotificationRepository(session).count_unread(user_id)


def _get_notification(repository: NotificationRepository, notification_id: str) -> Notification:
    notification = repository.get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(f"Notification {notification_id} not found")
    return notification


def mark_notification_read(
    session: Session, notification_id: str, *, now: datetime | None = None
) -> Notification:
    """Mark a notification read. Repeats and dismissed notifications are left as is."""

    repository = NotificationRepository(session)
    notification = _get_notification(repository, notification_id)
    if notification.mark_read(now or utc_now()):
        notification = repository.update(notification)
    return notification


def mark_all_notifications_read(
    session: Session, user_id: str, *, now: datetime | None = None
) -> int:
    """Mark every unread notification of ``user_id`` read; return how many changed."""

    return NotificationRepository(session).mark_all_as_read(user_id, read_at=now or utc_now())


def dismiss_notification(
    session: Session, notification_id: str, *, now: datetime | None = None
) -> Notification:
    """Dismiss a notification whatever its status; repeats are no-ops."""

    repository = NotificationRepository(session)
    notification = _get_notification(repository, notification_id)
    if notification.dismiss(now or utc_now()):
        notification = repository.update(notification)
    return notification


def list_recent_notifications(
    session: Session,
    *,
    status: str | None = None,
    notification_type: str | None = None,
    limit: int = 100,
) -> Sequence[Notification]:
    """Return the newest notifications across all users."""

    _ensure_valid_status(status)
    return NotificationRepository(session).list_recent(
        status=status, notification_type=notification_type, limit=min(limit, MAX_PAGE_SIZE)
    )


def get_notification_stats(session: Session) -> list[dict[str, object]]:
    """Group notification counts by status, then by type."""

    grouped: dict[str, dict[str, object]] = {}
    for status, notification_type, count in NotificationRepository(
        session
    ).count_by_status_and_type():
        entry = grouped.setdefault(status, {"status": status, "total": 0, "types": []})
        entry["types"].append({"type": notification_type, "count": count})
        entry["total"] += count
    return list(grouped.values())


__all__ = [
    "dismiss_notification",
    "get_notification_stats",
    "get_unread_count",
    "list_recent_notifications",
    "list_user_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
