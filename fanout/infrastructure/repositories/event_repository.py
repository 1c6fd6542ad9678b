"""Persistence helpers for event entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy import and_, case, delete, func, or_, select, update
from sqlalchemy.orm import Session

from fanout.domain.entities import Event, EventData, GeneratedNotification
from fanout.infrastructure.models import EventModel
from fanout.utils import ensure_utc, to_storage_datetime, utc_now


class EventRepository:
    """Provide storage operations for :class:`Event` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, event_id: str) -> Event | None:
        model = self.session.get(EventModel, event_id)
        return self._to_entity(model) if model else None

    def create(self, event: Event) -> Event:
        model = EventModel(event_id=event.event_id)
        model.type = event.type
        model.source_user_id = event.source_user_id
        model.target_user_id = event.target_user_id
        model.post_id = event.data.post_id
        model.comment_id = event.data.comment_id
        model.content = event.data.content
        model.mentioned_users = list(event.data.mentioned_users)
        model.metadata_ = dict(event.data.metadata)
        model.timestamp = to_storage_datetime(event.timestamp or utc_now())
        model.processed = event.processed
        model.notifications_generated = self._serialize_generated(
            event.notifications_generated
        )
        model.processing_attempts = event.processing_attempts
        model.expires_at = to_storage_datetime(event.expires_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list(
        self,
        *,
        event_type: str | None = None,
        processed: bool | None = None,
        limit: int = 100,
    ) -> Sequence[Event]:
        query = select(EventModel)
        if event_type:
            query = query.where(EventModel.type == event_type)
        if processed is not None:
            query = query.where(EventModel.processed.is_(processed))
        query = query.order_by(EventModel.timestamp.desc()).limit(limit)
        return [self._to_entity(model) for model in self.session.scalars(query).all()]

    def list_for_user(
        self, user_id: str, *, event_type: str | None = None, limit: int = 50
    ) -> Sequence[Event]:
        query = select(EventModel).where(
            or_(EventModel.source_user_id == user_id, EventModel.target_user_id == user_id)
        )
        if event_type:
            query = query.where(EventModel.type == event_type)
        query = query.order_by(EventModel.timestamp.desc()).limit(limit)
        return [self._to_entity(model) for model in self.session.scalars(query).all()]

    def list_unprocessed(self, *, max_attempts: int | None = None) -> Sequence[Event]:
        """Return unprocessed events oldest first, optionally skipping exhausted ones."""

        query = select(EventModel).where(EventModel.processed.is_(False))
        if max_attempts is not None:
            query = query.where(EventModel.processing_attempts < max_attempts)
        query = query.order_by(EventModel.timestamp.asc(), EventModel.event_id.asc())
        return [self._to_entity(model) for model in self.session.scalars(query).all()]

    def count_exhausted(self, *, max_attempts: int) -> int:
        query = select(func.count()).select_from(EventModel).where(
            EventModel.processed.is_(False),
            EventModel.processing_attempts >= max_attempts,
        )
        return int(self.session.scalar(query) or 0)

    def claim(self, event_id: str, *, now: datetime, lease: timedelta) -> bool:
        """Take the processing lease on an unprocessed event and count the attempt.

        Returns ``False`` when the event is processed, missing, or leased by
        another worker whose lease started less than ``lease`` before ``now``.
        """

        result = self.session.execute(
            update(EventModel)
            .where(
                EventModel.event_id == event_id,
                EventModel.processed.is_(False),
                or_(
                    EventModel.processing_started_at.is_(None),
                    EventModel.processing_started_at < to_storage_datetime(now - lease),
                ),
            )
            .values(
                processing_started_at=to_storage_datetime(now),
                processing_attempts=EventModel.processing_attempts + 1,
            )
        )
        self.session.commit()
        return result.rowcount == 1

    def release(self, event_id: str) -> None:
        """Drop the processing lease so a later attempt can claim the event."""

        self.session.execute(
            update(EventModel)
            .where(EventModel.event_id == event_id, EventModel.processed.is_(False))
            .values(processing_started_at=None)
        )
        self.session.commit()

    def mark_processed(
        self, event_id: str, generated: Sequence[GeneratedNotification]
    ) -> bool:
        """Flip ``processed`` and store ``generated`` in one conditional update.

        Returns ``False`` when the event was already processed or no longer exists.
        """

        result = self.session.execute(
            update(EventModel)
            .where(EventModel.event_id == event_id, EventModel.processed.is_(False))
            .values(
                processed=True,
                processing_started_at=None,
                notifications_generated=self._serialize_generated(generated),
            )
        )
        self.session.commit()
        return result.rowcount == 1

    def delete(self, event_id: str) -> bool:
        result = self.session.execute(
            delete(EventModel).where(EventModel.event_id == event_id)
        )
        self.session.commit()
        return bool(result.rowcount)

    def delete_expired(self, now: datetime) -> int:
        """Storage-level expiry of processed events past ``expires_at``."""

        result = self.session.execute(
            delete(EventModel).where(
                and_(
                    EventModel.processed.is_(True),
                    EventModel.expires_at.is_not(None),
                    EventModel.expires_at < to_storage_datetime(now),
                )
            )
        )
        self.session.commit()
        return int(result.rowcount or 0)

    def stats_by_type(self) -> list[dict[str, object]]:
        query = (
            select(
                EventModel.type,
                func.count(),
                func.sum(case((EventModel.processed.is_(True), 1), else_=0)),
            )
            .group_by(EventModel.type)
            .order_by(EventModel.type)
        )
        return [
            {"type": event_type, "count": int(count), "processed": int(processed or 0)}
            for event_type, count, processed in self.session.execute(query).all()
        ]

    @staticmethod
    def _serialize_generated(
        generated: Sequence[GeneratedNotification],
    ) -> list[dict[str, str]]:
        return [
            {"notification_id": item.notification_id, "user_id": item.user_id}
            for item in generated
        ]

    @staticmethod
    def _to_entity(model: EventModel) -> Event:
        return Event(
            event_id=model.event_id,
            type=model.type,
            source_user_id=model.source_user_id,
            target_user_id=model.target_user_id,
            data=EventData(
                post_id=model.post_id,
                comment_id=model.comment_id,
                content=model.content,
                mentioned_users=list(model.mentioned_users or []),
                metadata=dict(model.metadata_ or {}),
            ),
            timestamp=ensure_utc(model.timestamp),
            processed=bool(model.processed),
            notifications_generated=[
                GeneratedNotification(
                    notification_id=item["notification_id"], user_id=item["user_id"]
                )
                for item in model.notifications_generated or []
            ],
            processing_attempts=model.processing_attempts or 0,
            processing_started_at=ensure_utc(model.processing_started_at),
            expires_at=ensure_utc(model.expires_at),
        )


__all__ = ["EventRepository"]
