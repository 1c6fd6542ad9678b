"""Pydantic models describing event payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventDataPayload(BaseModel):
    """Subject references for an event plus free metadata."""

    post_id: str | None = None
    comment_id: str | None = None
    content: str | None = None
    mentioned_users: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class EventCreate(BaseModel):
    """Payload accepted when submitting a user action."""

    type: str = Field(..., description="LIKE, FOLLOW, COMMENT, POST_CREATE, MENTION or SHARE")
    source_user_id: str = Field(..., description="User performing the action")
    target_user_id: str | None = Field(default=None, description="User directly affected")
    data: EventDataPayload = Field(default_factory=EventDataPayload)


class EventAccepted(BaseModel):
    event_id: str
    type: str
    timestamp: datetime


class EventCreateResponse(BaseModel):
    message: str
    event: EventAccepted


class GeneratedNotificationRead(BaseModel):
    notification_id: str
    user_id: str

    model_config = ConfigDict(from_attributes=True)


class EventRead(BaseModel):
    event_id: str
    type: str
    source_user_id: str
    target_user_id: str | None = None
    data: EventDataPayload
    timestamp: datetime
    processed: bool
    notifications_generated: list[GeneratedNotificationRead] = Field(default_factory=list)
    processing_attempts: int = 0

    model_config = ConfigDict(from_attributes=True)


class EventTypeStats(BaseModel):
    type: str
    count: int
    processed: int


class EventListResponse(BaseModel):
    events: list[EventRead]
    count: int
    stats: list[EventTypeStats] = Field(default_factory=list)


class UserEventListResponse(BaseModel):
    events: list[EventRead]
    count: int
    user_id: str


class RecoveryResponse(BaseModel):
    message: str
    queued: int


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
]
