"""Domain entity representing a recorded user action."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

EVENT_TYPE_LIKE = "LIKE"
EVENT_TYPE_FOLLOW = "FOLLOW"
EVENT_TYPE_COMMENT = "COMMENT"
EVENT_TYPE_POST_CREATE = "POST_CREATE"
EVENT_TYPE_MENTION = "MENTION"
EVENT_TYPE_SHARE = "SHARE"

EVENT_TYPES = (
    EVENT_TYPE_LIKE,
    EVENT_TYPE_FOLLOW,
    EVENT_TYPE_COMMENT,
    EVENT_TYPE_POST_CREATE,
    EVENT_TYPE_MENTION,
    EVENT_TYPE_SHARE,
)


@dataclass
class EventData:
    """Subject references carried by an event plus an open metadata map."""

    post_id: str | None = None
    comment_id: str | None = None
    content: str | None = None
    mentioned_users: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GeneratedNotification:
    """Reference to a notification produced while processing an event."""

    notification_id: str
    user_id: str


@dataclass
class Event:
    """User action that may fan out into notifications."""

    event_id: str
    type: str
    source_user_id: str
    target_user_id: str | None = None
    data: EventData = field(default_factory=EventData)
    timestamp: datetime | None = None
    processed: bool = False
    notifications_generated: list[GeneratedNotification] = field(default_factory=list)
    processing_attempts: int = 0
    processing_started_at: datetime | None = None
    expires_at: datetime | None = None


__all__ = [
    "Event",
    "EventData",
    "GeneratedNotification",
    "EVENT_TYPES",
    "EVENT_TYPE_LIKE",
    "EVENT_TYPE_FOLLOW",
    "EVENT_TYPE_COMMENT",
    "EVENT_TYPE_POST_CREATE",
    "EVENT_TYPE_MENTION",
    "EVENT_TYPE_SHARE",
]
