"""Pure renderers for notification text and deep links."""

from __future__ import annotations

from fanout.domain.entities import (
    EVENT_TYPE_COMMENT,
    EVENT_TYPE_FOLLOW,
    EVENT_TYPE_LIKE,
    EVENT_TYPE_MENTION,
    EVENT_TYPE_POST_CREATE,
    EVENT_TYPE_SHARE,
    Event,
)

COMMENT_EXCERPT_LENGTH = 50
ELLIPSIS = "..."

_TEMPLATES = {
    EVENT_TYPE_LIKE: "{username} liked your post",
    EVENT_TYPE_FOLLOW: "{username} started following you",
    EVENT_TYPE_POST_CREATE: "{username} shared a new post",
    EVENT_TYPE_MENTION: "{username} mentioned you in a post",
    EVENT_TYPE_SHARE: "{username} shared your post",
}
_FALLBACK_TEMPLATE = "{username} performed an action"

_POST_LINK_TYPES = frozenset(
    {
        EVENT_TYPE_LIKE,
        EVENT_TYPE_COMMENT,
        EVENT_TYPE_SHARE,
        EVENT_TYPE_POST_CREATE,
        EVENT_TYPE_MENTION,
    }
)


def truncate_excerpt(text: str, limit: int = COMMENT_EXCERPT_LENGTH) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""

    if len(text) <= limit:
        return text
    return f"{text[:limit]}{ELLIPSIS}"


def render_notification_content(event: Event, username: str) -> str:
    """Return the human-readable text shown to the recipient."""

    if event.type == EVENT_TYPE_COMMENT:
        if event.data.content:
            return f'{username} commented: "{truncate_excerpt(event.data.content)}"'
        return f"{username} commented on your post"
    template = _TEMPLATES.get(event.type, _FALLBACK_TEMPLATE)
    return template.format(username=username)


def build_notification_url(event: Event, base_url: str) -> str:
    """Return the deep link opened when the notification is clicked."""

    base = base_url.rstrip("/")
    if event.type == EVENT_TYPE_FOLLOW:
        return f"{base}/profile/{event.source_user_id}"
    if event.type in _POST_LINK_TYPES and event.data.post_id:
        return f"{base}/posts/{event.data.post_id}"
    return base


__all__ = [
    "COMMENT_EXCERPT_LENGTH",
    "build_notification_url",
    "render_notification_content",
    "truncate_excerpt",
]
