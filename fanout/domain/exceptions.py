"""Errors raised by the fan-out core."""


class EventNotFoundError(LookupError):
    """Raised when an event identifier does not resolve to a stored event."""


class NotificationNotFoundError(LookupError):
    """Raised when a notification identifier does not resolve to a record."""


class SourceUserNotFoundError(LookupError):
    """Raised when the acting user of an event cannot be loaded."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(f"Source user {user_id} not found for event {event_id}")
        self.event_id = event_id
        self.user_id = user_id


__all__ = [
    "EventNotFoundError",
    "NotificationNotFoundError",
    "SourceUserNotFoundError",
]
