"""Domain entity representing a platform user."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

DEFAULT_NOTIFICATION_TYPES = ("LIKE", "FOLLOW", "COMMENT", "POST_CREATE", "MENTION")


@dataclass
class UserPreferences:
    email_notifications: bool = True
    push_notifications: bool = True
    notification_types: list[str] = field(
        default_factory=lambda: list(DEFAULT_NOTIFICATION_TYPES)
    )


@dataclass
class UserProfile:
    bio: str | None = None
    location: str | None = None
    company: str | None = None
    website: str | None = None


@dataclass
class User:
    """Account owned by the user-profile service and read by the fan-out core."""

    user_id: str
    username: str
    email: str
    preferences: UserPreferences = field(default_factory=UserPreferences)
    profile: UserProfile = field(default_factory=UserProfile)
    followers: list[str] = field(default_factory=list)
    following: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_subscribed_to(self, event_type: str) -> bool:
        """Return ``True`` when the user wants notifications of ``event_type``."""

        return event_type in self.preferences.notification_types


__all__ = ["DEFAULT_NOTIFICATION_TYPES", "User", "UserPreferences", "UserProfile"]
