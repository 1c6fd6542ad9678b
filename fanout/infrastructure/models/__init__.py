"""ORM models used by the application infrastructure."""

from .event import EventModel
from .notification import NotificationModel
from .user import UserModel, user_follow_table

__all__ = [
    "EventModel",
    "NotificationModel",
    "UserModel",
    "user_follow_table",
]
