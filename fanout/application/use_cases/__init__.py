"""Aggregate application use cases."""

from .events import create_event
from .notifications import process_event, recover_unprocessed_events, run_maintenance

__all__ = [
    "create_event",
    "process_event",
    "recover_unprocessed_events",
    "run_maintenance",
]
