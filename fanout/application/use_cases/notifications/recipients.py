"""Recipient resolution and preference filtering for event fan-out."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fanout.domain.entities import (
    EVENT_TYPE_COMMENT,
    EVENT_TYPE_FOLLOW,
    EVENT_TYPE_LIKE,
    EVENT_TYPE_MENTION,
    EVENT_TYPE_POST_CREATE,
    EVENT_TYPE_SHARE,
    Event,
    User,
)
from fanout.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)

_TARGETED_TYPES = frozenset(
    {EVENT_TYPE_LIKE, EVENT_TYPE_COMMENT, EVENT_TYPE_SHARE, EVENT_TYPE_FOLLOW}
)


def resolve_candidate_ids(
    event: Event, source_user: User, users: UserRepository
) -> list[str]:
    """Return the ordered, de-duplicated identities that may be notified.

    The acting user is never a candidate. Unknown event types yield no
    candidates and are logged, so the event can still be marked processed.
    """

    if event.type in _TARGETED_TYPES:
        candidates: Iterable[str] = [event.target_user_id] if event.target_user_id else []
    elif event.type == EVENT_TYPE_POST_CREATE:
        candidates = users.list_follower_ids(source_user.user_id)
    elif event.type == EVENT_TYPE_MENTION:
        candidates = event.data.mentioned_users
    else:
        logger.warning(
            "Unknown event type %s on event %s; no recipients resolved",
            event.type,
            event.event_id,
        )
        return []

    return _unique_excluding(candidates, exclude=source_user.user_id)


def filter_by_preferences(
    candidate_ids: Iterable[str], event_type: str, users: UserRepository
) -> list[User]:
    """Keep candidates that subscribe to ``event_type``, preserving order.

    Candidates whose user record cannot be loaded are dropped silently.
    """

    candidate_ids = list(candidate_ids)
    user_map = users.get_map_by_ids(candidate_ids)
    recipients: list[User] = []
    for candidate_id in candidate_ids:
        user = user_map.get(candidate_id)
        if user is None:
            logger.debug("Dropping recipient %s: user not found", candidate_id)
            continue
        if not user.is_subscribed_to(event_type):
            logger.debug("Dropping recipient %s: not subscribed to %s", candidate_id, event_type)
            continue
        recipients.append(user)
    return recipients


def _unique_excluding(candidates: Iterable[str], *, exclude: str) -> list[str]:
    unique: list[str] = []
    for candidate in candidates:
        if not candidate or candidate == exclude or candidate in unique:
            continue
        unique.append(candidate)
    return unique


__all__ = ["filter_by_preferences", "resolve_candidate_ids"]
