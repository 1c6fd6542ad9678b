from .event import (
    EventAccepted,
    EventCreate,
    EventCreateResponse,
    EventDataPayload,
    EventListResponse,
    EventRead,
    EventTypeStats,
    GeneratedNotificationRead,
    RecoveryResponse,
    UserEventListResponse,
)
from .notification import (
    CleanupResponse,
    MarkAllReadResponse,
    NotificationDataRead,
    NotificationListResponse,
    NotificationOverviewResponse,
    NotificationRead,
    NotificationStatusResponse,
    NotificationStatusStats,
    NotificationTypeCount,
    UnreadCountResponse,
)

__all__ = [
    "EventAccepted",
    "EventCreate",
    "EventCreateResponse",
    "EventDataPayload",
    "EventListResponse",
    "EventRead",
    "EventTypeStats",
    "GeneratedNotificationRead",
    "RecoveryResponse",
    "UserEventListResponse",
    "CleanupResponse",
    "MarkAllReadResponse",
    "NotificationDataRead",
    "NotificationListResponse",
    "NotificationOverviewResponse",
    "NotificationRead",
    "NotificationStatusResponse",
    "NotificationStatusStats",
    "NotificationTypeCount",
    "UnreadCountResponse",
]
