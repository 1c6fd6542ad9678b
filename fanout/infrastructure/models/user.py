"""SQLAlchemy models for users and their follow edges."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String, Table, Text

from fanout.domain.entities import DEFAULT_NOTIFICATION_TYPES
from fanout.infrastructure.database import Base
from fanout.utils import to_storage_datetime, utc_now


def _storage_now():
    return to_storage_datetime(utc_now())


user_follow_table = Table(
    "user_follow",
    Base.metadata,
    Column(
        "follower_id",
        String(64),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "followee_id",
        String(64),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class UserModel(Base):
    """Database representation of a platform user."""

    __tablename__ = "app_user"

    user_id = Column(String(64), primary_key=True)
    username = Column(String(30), nullable=False, index=True)
    email = Column(String(120), nullable=False, unique=True)
    email_notifications = Column(Boolean, nullable=False, default=True)
    push_notifications = Column(Boolean, nullable=False, default=True)
    notification_types = Column(
        JSON, nullable=False, default=lambda: list(DEFAULT_NOTIFICATION_TYPES)
    )
    bio = Column(Text, nullable=True)
    location = Column(String(120), nullable=True)
    company = Column(String(120), nullable=True)
    website = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=_storage_now, index=True)
    updated_at = Column(DateTime, nullable=False, default=_storage_now, onupdate=_storage_now)


__all__ = ["UserModel", "user_follow_table"]
