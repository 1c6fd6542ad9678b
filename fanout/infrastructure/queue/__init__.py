"""Event intake queue."""

from .event_queue import EventQueue

__all__ = ["EventQueue"]
