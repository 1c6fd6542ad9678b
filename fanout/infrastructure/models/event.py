"""SQLAlchemy model for recorded user actions."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, JSON, String, Text

from fanout.infrastructure.database import Base


class EventModel(Base):
    """Database representation of an event awaiting or finished fan-out."""

    __tablename__ = "event"

    event_id = Column(String(64), primary_key=True)
    type = Column(String(20), nullable=False, index=True)
    # Plain identities: events outlive users and must record unknown actors.
    source_user_id = Column(String(64), nullable=False, index=True)
    target_user_id = Column(String(64), nullable=True, index=True)
    post_id = Column(String(64), nullable=True)
    comment_id = Column(String(64), nullable=True)
    content = Column(Text, nullable=True)
    mentioned_users = Column(JSON, nullable=False, default=list)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    timestamp = Column(DateTime, nullable=False, index=True)
    processed = Column(Boolean, nullable=False, default=False, index=True)
    notifications_generated = Column(JSON, nullable=False, default=list)
    processing_attempts = Column(Integer, nullable=False, default=0)
    processing_started_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True, index=True)

    __table_args__ = (
        Index("ix_event_source_timestamp", "source_user_id", "timestamp"),
        Index("ix_event_target_timestamp", "target_user_id", "timestamp"),
        Index("ix_event_type_timestamp", "type", "timestamp"),
        Index("ix_event_processed_timestamp", "processed", "timestamp"),
    )


__all__ = ["EventModel"]
