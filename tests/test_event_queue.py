"""Tests for the single-consumer event queue."""

from __future__ import annotations

import threading
import time

import pytest
from anyio import to_thread

from fanout.application.use_cases.notifications import process_event_in_new_session
from fanout.infrastructure.queue import EventQueue
from fanout.infrastructure.repositories import EventRepository, NotificationRepository

pytestmark = pytest.mark.anyio


async def test_events_are_handled_in_submission_order():
    handled: list[str] = []
    queue = EventQueue(handled.append)
    queue.start()

    for event_id in ("e1", "e2", "e3"):
        queue.submit_id(event_id)
    await queue.stop()

    assert handled == ["e1", "e2", "e3"]
    assert queue.is_running is False


async def test_pending_duplicates_are_ignored():
    handled: list[str] = []
    queue = EventQueue(handled.append)

    assert queue.submit_id("e1") is True
    assert queue.submit_id("e1") is False
    assert queue.pending_count == 1

    queue.start()
    await queue.join()
    await queue.stop()

    assert handled == ["e1"]
    assert queue.pending_count == 0


async def test_handler_failure_does_not_stop_the_drain(caplog):
    handled: list[str] = []

    def handler(event_id: str) -> None:
        if event_id == "bad":
            raise RuntimeError("boom")
        handled.append(event_id)

    queue = EventQueue(handler)
    queue.start()
    for event_id in ("e1", "bad", "e2"):
        queue.submit_id(event_id)
    await queue.stop()

    assert handled == ["e1", "e2"]
    assert "Error processing event bad from queue" in caplog.text


async def test_handler_never_runs_concurrently():
    lock = threading.Lock()
    active = 0
    peak = 0

    def handler(event_id: str) -> None:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.01)
        with lock:
            active -= 1

    queue = EventQueue(handler)
    queue.start()
    for index in range(10):
        queue.submit_id(f"e{index}")
    await queue.stop()

    assert peak == 1


async def test_recovery_is_queued_behind_live_events():
    handled: list[str] = []
    queue = EventQueue(handled.append, recovery_source=lambda: ["old1", "live", "old2"])

    queue.submit_id("live")
    queued = await queue.schedule_recovery()
    queue.start()
    await queue.stop()

    assert queued == 2
    assert handled == ["live", "old1", "old2"]


async def test_recovery_without_source_is_a_noop():
    queue = EventQueue(lambda event_id: None)

    assert await queue.schedule_recovery() == 0


async def test_queue_drives_event_processing(session, make_user, make_event):
    make_user("u1")
    make_user("u2")
    event = make_event("FOLLOW", "u2", "u1")
    queue = EventQueue(process_event_in_new_session)
    queue.start()

    queue.submit(event)
    await queue.stop()

    session.expire_all()
    assert EventRepository(session).get(event.event_id).processed is True
    assert len(NotificationRepository(session).list_for_user("u1")) == 1


async def test_submit_from_worker_thread_wakes_idle_drain():
    done = threading.Event()

    def handler(event_id: str) -> None:
        done.set()

    queue = EventQueue(handler)
    queue.start()

    def submit_and_wait() -> bool:
        queue.submit_id("e1")
        # The loop sits idle on this thread until the handler has run.
        return done.wait(timeout=2.0)

    try:
        assert await to_thread.run_sync(submit_and_wait) is True
    finally:
        await queue.stop()
