"""Helpers for working with timezone-aware datetimes.

Storage keeps naive UTC values; the domain layer works with aware ones.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fanout.config import get_settings


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured display timezone, falling back to UTC."""

    tz_name = (get_settings().app_timezone or "").strip()
    if not tz_name or tz_name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        return timezone.utc


def utc_now() -> datetime:
    """Return the current aware UTC time."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime; naive values are assumed UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC without ``tzinfo`` for persistence."""

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.replace(tzinfo=None)


def format_time_ago(value: datetime, *, now: datetime | None = None) -> str:
    """Describe the age of ``value`` the way the notification feed shows it."""

    reference = ensure_utc(now) or utc_now()
    seconds = int((reference - ensure_utc(value)).total_seconds())
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 2592000:
        return f"{seconds // 86400}d ago"
    return ensure_utc(value).astimezone(get_app_timezone()).date().isoformat()


__all__ = [
    "ensure_utc",
    "format_time_ago",
    "get_app_timezone",
    "to_storage_datetime",
    "utc_now",
]
