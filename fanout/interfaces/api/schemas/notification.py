"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class NotificationDataRead(BaseModel):
    post_id: str | None = None
    comment_id: str | None = None
    url: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    notification_id: str
    user_id: str
    type: str
    content: str
    status: str
    source_user_id: str | None = None
    related_event_id: str | None = None
    data: NotificationDataRead
    timestamp: datetime
    read_at: datetime | None = None
    dismissed_at: datetime | None = None
    age_minutes: int
    time_ago: str


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int
    count: int
    user_id: str


class UnreadCountResponse(BaseModel):
    user_id: str
    unread_count: int


class NotificationStatusResponse(BaseModel):
    message: str
    notification_id: str
    status: str
    read_at: datetime | None = None
    dismissed_at: datetime | None = None


class MarkAllReadResponse(BaseModel):
    message: str
    modified_count: int
    user_id: str


class NotificationTypeCount(BaseModel):
    type: str
    count: int


class NotificationStatusStats(BaseModel):
    status: str
    total: int
    types: list[NotificationTypeCount]


class NotificationOverviewResponse(BaseModel):
    notifications: list[NotificationRead]
    count: int
    stats: list[NotificationStatusStats]


class CleanupResponse(BaseModel):
    message: str
    deleted_count: int
    expired_notifications: int
    expired_events: int


__all__ = [
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
