"""Domain entities exposed by the application."""

from .event import (
    EVENT_TYPE_COMMENT,
    EVENT_TYPE_FOLLOW,
    EVENT_TYPE_LIKE,
    EVENT_TYPE_MENTION,
    EVENT_TYPE_POST_CREATE,
    EVENT_TYPE_SHARE,
    EVENT_TYPES,
    Event,
    EventData,
    GeneratedNotification,
)
from .notification import (
    NOTIFICATION_STATUS_DISMISSED,
    NOTIFICATION_STATUS_READ,
    NOTIFICATION_STATUS_UNREAD,
    NOTIFICATION_STATUSES,
    Notification,
    NotificationData,
)
from .user import DEFAULT_NOTIFICATION_TYPES, User, UserPreferences, UserProfile

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
    "Notification",
    "NotificationData",
    "NOTIFICATION_STATUSES",
    "NOTIFICATION_STATUS_UNREAD",
    "NOTIFICATION_STATUS_READ",
    "NOTIFICATION_STATUS_DISMISSED",
    "DEFAULT_NOTIFICATION_TYPES",
    "User",
    "UserPreferences",
    "UserProfile",
]
