"""Tests for notification text and deep link rendering."""

from __future__ import annotations

import pytest

from fanout.application.use_cases.notifications import (
    build_notification_url,
    render_notification_content,
)
from fanout.domain.entities import Event, EventData

BASE_URL = "http://localhost:3000"


def _event(event_type, **data) -> Event:
    return Event(
        event_id="evt-1",
        type=event_type,
        source_user_id="u2",
        target_user_id="u1",
        data=EventData(**data),
    )


@pytest.mark.parametrize(
    ("event_type", "expected"),
    [
        ("LIKE", "bruno liked your post"),
        ("FOLLOW", "bruno started following you"),
        ("POST_CREATE", "bruno shared a new post"),
        ("MENTION", "bruno mentioned you in a post"),
        ("SHARE", "bruno shared your post"),
        ("COMMENT", "bruno commented on your post"),
        ("POKE", "bruno performed an action"),
    ],
)
def test_content_templates(event_type, expected):
    assert render_notification_content(_event(event_type), "bruno") == expected


def test_comment_excerpt_is_truncated_with_ellipsis():
    text = "x" * 51

    content = render_notification_content(_event("COMMENT", content=text), "bruno")

    assert content == f'bruno commented: "{"x" * 50}..."'


def test_comment_excerpt_at_limit_is_kept_whole():
    text = "y" * 50

    content = render_notification_content(_event("COMMENT", content=text), "bruno")

    assert content == f'bruno commented: "{text}"'


def test_post_events_link_to_the_post():
    for event_type in ("LIKE", "COMMENT", "SHARE", "POST_CREATE", "MENTION"):
        url = build_notification_url(_event(event_type, post_id="p9"), BASE_URL)
        assert url == f"{BASE_URL}/posts/p9"


def test_follow_links_to_source_profile():
    assert build_notification_url(_event("FOLLOW"), BASE_URL + "/") == f"{BASE_URL}/profile/u2"


def test_missing_subject_falls_back_to_base_url():
    assert build_notification_url(_event("LIKE"), BASE_URL) == BASE_URL
    assert build_notification_url(_event("POKE", post_id="p1"), BASE_URL) == BASE_URL
