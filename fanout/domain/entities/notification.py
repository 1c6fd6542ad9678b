"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_STATUS_UNREAD = "unread"
NOTIFICATION_STATUS_READ = "read"
NOTIFICATION_STATUS_DISMISSED = "dismissed"

NOTIFICATION_STATUSES = (
    NOTIFICATION_STATUS_UNREAD,
    NOTIFICATION_STATUS_READ,
    NOTIFICATION_STATUS_DISMISSED,
)


@dataclass
class NotificationData:
    """Subject references and deep link attached to a notification."""

    post_id: str | None = None
    comment_id: str | None = None
    url: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Notification:
    """Message delivered to a single recipient.

    ``content`` is rendered once at creation and never recomputed. Status only
    moves forward: unread -> read, unread or read -> dismissed.
    """

    notification_id: str
    user_id: str
    type: str
    content: str
    source_user_id: str | None = None
    related_event_id: str | None = None
    data: NotificationData = field(default_factory=NotificationData)
    status: str = NOTIFICATION_STATUS_UNREAD
    timestamp: datetime | None = None
    read_at: datetime | None = None
    dismissed_at: datetime | None = None
    expires_at: datetime | None = None

    def mark_read(self, now: datetime) -> bool:
        """Move an unread notification to read; return whether it changed."""

        if self.status != NOTIFICATION_STATUS_UNREAD:
            return False
        self.status = NOTIFICATION_STATUS_READ
        self.read_at = now
        return True

    def dismiss(self, now: datetime) -> bool:
        """Soft-delete the notification; return whether it changed."""

        if self.status == NOTIFICATION_STATUS_DISMISSED:
            return False
        self.status = NOTIFICATION_STATUS_DISMISSED
        self.dismissed_at = now
        return True

    def age_minutes(self, now: datetime) -> int:
        if self.timestamp is None:
            return 0
        return int((now - self.timestamp).total_seconds() // 60)


__all__ = [
    "Notification",
    "NotificationData",
    "NOTIFICATION_STATUSES",
    "NOTIFICATION_STATUS_UNREAD",
    "NOTIFICATION_STATUS_READ",
    "NOTIFICATION_STATUS_DISMISSED",
]
