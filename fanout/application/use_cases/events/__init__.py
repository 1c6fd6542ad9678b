"""Use cases for recording and inspecting events."""

from .list_events import delete_event, get_event, get_event_stats, list_events, list_user_events
from .submit_event import create_event

__all__ = [
    "create_event",
    "delete_event",
    "get_event",
    "get_event_stats",
    "list_events",
    "list_user_events",
]
