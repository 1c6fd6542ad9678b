"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_utc,
    format_time_ago,
    get_app_timezone,
    to_storage_datetime,
    utc_now,
)

__all__ = [
    "ensure_utc",
    "format_time_ago",
    "get_app_timezone",
    "to_storage_datetime",
    "utc_now",
]
