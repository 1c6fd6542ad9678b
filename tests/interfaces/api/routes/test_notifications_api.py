"""Tests for the notification inbox endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fanout.application.use_cases.notifications import process_event
from main import create_app

from ....conftest import NOW


@pytest.fixture()
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture()
def inbox(session, make_user, make_event):
    """Give ``u1`` a FOLLOW and a COMMENT notification from ``u2``."""

    make_user("u1", "alice")
    make_user("u2", "bruno")
    process_event(session, make_event("FOLLOW", "u2", "u1").event_id, now=NOW)
    process_event(
        session,
        make_event("COMMENT", "u2", "u1", post_id="p1", content="Nice shot!").event_id,
        now=NOW,
    )


def test_list_user_notifications(client, inbox):
    body = client.get("/notifications/users/u1").json()

    assert body["count"] == 2
    assert body["unread_count"] == 2
    assert {item["type"] for item in body["notifications"]} == {"FOLLOW", "COMMENT"}
    comment = next(item for item in body["notifications"] if item["type"] == "COMMENT")
    assert comment["content"] == 'bruno commented: "Nice shot!"'
    assert comment["data"]["url"] == "http://localhost:3000/posts/p1"
    assert comment["time_ago"]


def test_list_filters_by_types_and_status(client, inbox):
    by_type = client.get("/notifications/users/u1", params={"types": "follow"}).json()
    read = client.get("/notifications/users/u1", params={"status": "read"}).json()

    assert [item["type"] for item in by_type["notifications"]] == ["FOLLOW"]
    assert read["count"] == 0


def test_invalid_status_is_rejected(client):
    response = client.get("/notifications/users/u1", params={"status": "archived"})

    assert response.status_code == 400


def test_read_and_dismiss_flow(client, inbox):
    notification_id = client.get("/notifications/users/u1").json()["notifications"][0][
        "notification_id"
    ]

    read = client.put(f"/notifications/{notification_id}/read")
    again = client.put(f"/notifications/{notification_id}/read")
    dismissed = client.delete(f"/notifications/{notification_id}")

    assert read.status_code == 200
    assert read.json()["status"] == "read"
    assert again.json()["read_at"] == read.json()["read_at"]
    assert dismissed.json()["status"] == "dismissed"
    unread = client.get("/notifications/users/u1/unread-count").json()
    assert unread == {"user_id": "u1", "unread_count": 1}


def test_mark_all_read(client, inbox):
    response = client.put("/notifications/users/u1/read-all")

    assert response.json()["modified_count"] == 2
    assert client.get("/notifications/users/u1/unread-count").json()["unread_count"] == 0


def test_unknown_notification_returns_404(client):
    assert client.put("/notifications/missing/read").status_code == 404
    assert client.delete("/notifications/missing").status_code == 404


def test_overview_and_cleanup(client, inbox):
    overview = client.get("/notifications/").json()
    cleanup = client.post("/notifications/cleanup")

    assert overview["count"] == 2
    assert overview["stats"] == [
        {
            "status": "unread",
            "total": 2,
            "types": [{"type": "COMMENT", "count": 1}, {"type": "FOLLOW", "count": 1}],
        }
    ]
    assert cleanup.status_code == 200
    assert cleanup.json()["deleted_count"] == 0
