"""Validation helpers for event submission."""

from __future__ import annotations

from typing import Any

from fanout.domain.entities import EVENT_TYPES


def ensure_valid_event_type(event_type: str | None) -> str:
    """Return the normalized event type or raise ``ValueError``."""

    normalized = (event_type or "").strip().upper()
    if normalized not in EVENT_TYPES:
        raise ValueError(
            f"Invalid event type: {event_type!r}. Valid types: {', '.join(EVENT_TYPES)}"
        )
    return normalized


def ensure_user_id(value: str | None, *, field_name: str) -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise ValueError(f"{field_name} is required")
    return normalized


def ensure_mentioned_users(value: Any) -> list[str]:
    """Return mentioned identities as an ordered list of non-empty strings."""

    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError("mentioned_users must be a list of user identifiers")
    mentioned: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValueError("mentioned_users must contain non-empty strings")
        mentioned.append(item.strip())
    return mentioned
