"""Endpoints for reading and updating stored notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fanout.application.use_cases.notifications import (
    dismiss_notification as dismiss_notification_uc,
    get_notification_stats as get_notification_stats_uc,
    get_unread_count as get_unread_count_uc,
    list_recent_notifications as list_recent_notifications_uc,
    list_user_notifications as list_user_notifications_uc,
    mark_all_notifications_read as mark_all_notifications_read_uc,
    mark_notification_read as mark_notification_read_uc,
    run_maintenance as run_maintenance_uc,
)
from fanout.domain.entities import Notification
from fanout.domain.exceptions import NotificationNotFoundError
from fanout.infrastructure.database import get_db
from fanout.interfaces.api.schemas import (
    CleanupResponse,
    MarkAllReadResponse,
    NotificationDataRead,
    NotificationListResponse,
    NotificationOverviewResponse,
    NotificationRead,
    NotificationStatusResponse,
    NotificationStatusStats,
    UnreadCountResponse,
)
from fanout.utils import format_time_ago, utc_now

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    now = utc_now()
    return NotificationRead(
        notification_id=notification.notification_id,
        user_id=notification.user_id,
        type=notification.type,
        content=notification.content,
        status=notification.status,
        source_user_id=notification.source_user_id,
        related_event_id=notification.related_event_id,
        data=NotificationDataRead(
            post_id=notification.data.post_id,
            comment_id=notification.data.comment_id,
            url=notification.data.url,
            image_url=notification.data.image_url,
            metadata=notification.data.metadata or {},
        ),
        timestamp=notification.timestamp,
        read_at=notification.read_at,
        dismissed_at=notification.dismissed_at,
        age_minutes=notification.age_minutes(now),
        time_ago=format_time_ago(notification.timestamp, now=now),
    )


def _split_types(types: str | None) -> list[str]:
    if not types:
        return []
    return [item.strip().upper() for item in types.split(",") if item.strip()]


@router.get("/", response_model=NotificationOverviewResponse)
def list_notifications(
    status_filter: str | None = Query(default=None, alias="status"),
    type: str | None = Query(default=None),
    limit: int = Query(100, ge=1, le=200),
    db: Session = Depends(get_db),
) -> NotificationOverviewResponse:
    """Return recent notifications across users with status/type statistics."""

    try:
        notifications = list_recent_notifications_uc(
            db, status=status_filter, notification_type=type, limit=limit
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return NotificationOverviewResponse(
        notifications=[_notification_to_schema(item) for item in notifications],
        count=len(notifications),
        stats=[NotificationStatusStats(**entry) for entry in get_notification_stats_uc(db)],
    )


@router.get("/users/{user_id}", response_model=NotificationListResponse)
def list_user_notifications(
    user_id: str,
    status_filter: str | None = Query(default=None, alias="status"),
    types: str | None = Query(default=None, description="Comma separated event types"),
    limit: int = Query(50, ge=1, le=200),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> NotificationListResponse:
    """Return a page of ``user_id``'s notifications, newest first."""

    try:
        notifications = list_user_notifications_uc(
            db,
            user_id,
            status=status_filter,
            types=_split_types(types),
            limit=limit,
            skip=skip,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return NotificationListResponse(
        notifications=[_notification_to_schema(item) for item in notifications],
        unread_count=get_unread_count_uc(db, user_id),
        count=len(notifications),
        user_id=user_id,
    )


@router.get("/users/{user_id}/unread-count", response_model=UnreadCountResponse)
def read_unread_count(user_id: str, db: Session = Depends(get_db)) -> UnreadCountResponse:
    return UnreadCountResponse(user_id=user_id, unread_count=get_unread_count_uc(db, user_id))


@router.put("/users/{user_id}/read-all", response_model=MarkAllReadResponse)
def mark_all_read(user_id: str, db: Session = Depends(get_db)) -> MarkAllReadResponse:
    modified = mark_all_notifications_read_uc(db, user_id)
    return MarkAllReadResponse(
        message="All notifications marked as read", modified_count=modified, user_id=user_id
    )


@router.put("/{notification_id}/read", response_model=NotificationStatusResponse)
def mark_read(notification_id: str, db: Session = Depends(get_db)) -> NotificationStatusResponse:
    try:
        notification = mark_notification_read_uc(db, notification_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationStatusResponse(
        message="Notification marked as read",
        notification_id=notification.notification_id,
        status=notification.status,
        read_at=notification.read_at,
        dismissed_at=notification.dismissed_at,
    )


@router.delete("/{notification_id}", response_model=NotificationStatusResponse)
def dismiss(notification_id: str, db: Session = Depends(get_db)) -> NotificationStatusResponse:
    """Soft-delete a notification by moving it to ``dismissed``."""

    try:
        notification = dismiss_notification_uc(db, notification_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationStatusResponse(
        message="Notification dismissed",
        notification_id=notification.notification_id,
        status=notification.status,
        read_at=notification.read_at,
        dismissed_at=notification.dismissed_at,
    )


@router.post("/cleanup", response_model=CleanupResponse)
def cleanup(db: Session = Depends(get_db)) -> CleanupResponse:
    """Run the retention sweep and storage expiry now."""

    report = run_maintenance_uc(db)
    return CleanupResponse(
        message="Cleanup completed",
        deleted_count=report.stale_notifications_deleted,
        expired_notifications=report.expired_notifications_deleted,
        expired_events=report.expired_events_deleted,
    )
