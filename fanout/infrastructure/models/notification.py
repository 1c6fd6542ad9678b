"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Column, DateTime, Index, JSON, String, Text

from fanout.domain.entities import NOTIFICATION_STATUS_UNREAD
from fanout.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    notification_id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=NOTIFICATION_STATUS_UNREAD, index=True)
    # Provenance only; notifications survive deletion of the event.
    related_event_id = Column(String(64), nullable=True, index=True)
    source_user_id = Column(String(64), nullable=True, index=True)
    post_id = Column(String(64), nullable=True)
    comment_id = Column(String(64), nullable=True)
    url = Column(String(255), nullable=True)
    image_url = Column(String(255), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    timestamp = Column(DateTime, nullable=False, index=True)
    read_at = Column(DateTime, nullable=True)
    dismissed_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=False, index=True)

    __table_args__ = (
        Index("ix_notification_user_timestamp", "user_id", "timestamp"),
        Index("ix_notification_user_status_timestamp", "user_id", "status", "timestamp"),
        Index("ix_notification_type_timestamp", "type", "timestamp"),
        Index("ix_notification_source_timestamp", "source_user_id", "timestamp"),
    )


__all__ = ["NotificationModel"]
