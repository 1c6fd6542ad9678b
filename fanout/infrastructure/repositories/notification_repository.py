"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from fanout.domain.entities import (
    NOTIFICATION_STATUS_READ,
    NOTIFICATION_STATUS_UNREAD,
    Notification,
    NotificationData,
)
from fanout.infrastructure.models import NotificationModel
from fanout.utils import ensure_utc, to_storage_datetime


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(notification_id=notification.notification_id)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: Notification) -> Notification:
        model = self.session.get(NotificationModel, notification.notification_id)
        if model is None:
            msg = f"Notification with id {notification.notification_id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def find_recent_duplicate(
        self,
        *,
        user_id: str,
        source_user_id: str,
        notification_type: str,
        post_id: str | None,
        since: datetime,
    ) -> Notification | None:
        """Return a notification for the same trigger created at or after ``since``."""

        query = select(NotificationModel).where(
            NotificationModel.user_id == user_id,
            NotificationModel.source_user_id == source_user_id,
            NotificationModel.type == notification_type,
            NotificationModel.timestamp >= to_storage_datetime(since),
        )
        if post_id is None:
            query = query.where(NotificationModel.post_id.is_(None))
        else:
            query = query.where(NotificationModel.post_id == post_id)
        model = self.session.scalars(query.limit(1)).first()
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: str,
        *,
        status: str | None = None,
        types: Iterable[str] | None = None,
        limit: int = 50,
        skip: int = 0,
    ) -> Sequence[Notification]:
        query = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if status:
            query = query.where(NotificationModel.status == status)
        type_filter = [item for item in (types or []) if item]
        if type_filter:
            query = query.where(NotificationModel.type.in_(type_filter))
        query = (
            query.order_by(
                NotificationModel.timestamp.desc(),
                NotificationModel.notification_id.desc(),
            )
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(model) for model in self.session.scalars(query).all()]

    def list_recent(
        self,
        *,
        status: str | None = None,
        notification_type: str | None = None,
        limit: int = 100,
    ) -> Sequence[Notification]:
        query = select(NotificationModel)
        if status:
            query = query.where(NotificationModel.status == status)
        if notification_type:
            query = query.where(NotificationModel.type == notification_type)
        query = query.order_by(NotificationModel.timestamp.desc()).limit(limit)
        return [self._to_entity(model) for model in self.session.scalars(query).all()]

    def count_unread(self, user_id: str) -> int:
        query = select(func.count()).select_from(NotificationModel).where(
            NotificationModel.user_id == user_id,
            NotificationModel.status == NOTIFICATION_STATUS_UNREAD,
        )
        return int(self.session.scalar(query) or 0)

    def mark_all_as_read(self, user_id: str, *, read_at: datetime) -> int:
        result = self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.status == NOTIFICATION_STATUS_UNREAD,
            )
            .values(status=NOTIFICATION_STATUS_READ, read_at=to_storage_datetime(read_at))
        )
        self.session.commit()
        return int(result.rowcount or 0)

    def count_by_status_and_type(self) -> list[tuple[str, str, int]]:
        query = (
            select(NotificationModel.status, NotificationModel.type, func.count())
            .group_by(NotificationModel.status, NotificationModel.type)
            .order_by(NotificationModel.status, NotificationModel.type)
        )
        return [
            (status, notification_type, int(count))
            for status, notification_type, count in self.session.execute(query).all()
        ]

    def delete_older_than(self, before: datetime, *, statuses: Sequence[str]) -> int:
        """Delete notifications created before ``before`` whose status is in ``statuses``."""

        if not statuses:
            return 0
        result = self.session.execute(
            delete(NotificationModel).where(
                NotificationModel.timestamp < to_storage_datetime(before),
                NotificationModel.status.in_(list(statuses)),
            )
        )
        self.session.commit()
        return int(result.rowcount or 0)

    def delete_expired(self, now: datetime) -> int:
        """Storage-level expiry of any notification past ``expires_at``."""

        result = self.session.execute(
            delete(NotificationModel).where(
                NotificationModel.expires_at < to_storage_datetime(now)
            )
        )
        self.session.commit()
        return int(result.rowcount or 0)

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.user_id = notification.user_id
        model.type = notification.type
        model.content = notification.content
        model.status = notification.status
        model.related_event_id = notification.related_event_id
        model.source_user_id = notification.source_user_id
        model.post_id = notification.data.post_id
        model.comment_id = notification.data.comment_id
        model.url = notification.data.url
        model.image_url = notification.data.image_url
        model.metadata_ = dict(notification.data.metadata or {})
        model.timestamp = to_storage_datetime(notification.timestamp)
        model.read_at = to_storage_datetime(notification.read_at)
        model.dismissed_at = to_storage_datetime(notification.dismissed_at)
        model.expires_at = to_storage_datetime(notification.expires_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            notification_id=model.notification_id,
            user_id=model.user_id,
            type=model.type,
            content=model.content,
            source_user_id=model.source_user_id,
            related_event_id=model.related_event_id,
            data=NotificationData(
                post_id=model.post_id,
                comment_id=model.comment_id,
                url=model.url,
                image_url=model.image_url,
                metadata=dict(model.metadata_ or {}),
            ),
            status=model.status,
            timestamp=ensure_utc(model.timestamp),
            read_at=ensure_utc(model.read_at),
            dismissed_at=ensure_utc(model.dismissed_at),
            expires_at=ensure_utc(model.expires_at),
        )


__all__ = ["NotificationRepository"]
