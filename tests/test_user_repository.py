"""Tests for follow edges stored by the user repository."""

from __future__ import annotations

import pytest

from fanout.infrastructure.repositories import UserRepository


def test_edges_are_loaded_only_on_request(session, make_user):
    make_user("u1")
    make_user("u2", following=("u1",))
    make_user("u3", following=("u1",))
    repository = UserRepository(session)

    plain = repository.get("u1")
    detailed = repository.get("u1", include_edges=True)

    assert plain.followers == []
    assert detailed.followers == ["u2", "u3"]
    assert repository.get("u2", include_edges=True).following == ["u1"]
    assert repository.get_map_by_ids(["u1", "u2"])["u1"].followers == []


def test_follow_and_unfollow(session, make_user):
    make_user("u1")
    make_user("u2")
    repository = UserRepository(session)

    assert repository.follow("u2", "u1") is True
    assert repository.follow("u2", "u1") is False
    assert repository.list_follower_ids("u1") == ["u2"]

    assert repository.unfollow("u2", "u1") is True
    assert repository.unfollow("u2", "u1") is False
    assert repository.list_follower_ids("u1") == []


def test_users_cannot_follow_themselves(session, make_user):
    make_user("u1")

    with pytest.raises(ValueError):
        UserRepository(session).follow("u1", "u1")
