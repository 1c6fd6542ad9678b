"""In-process single-consumer queue that serializes event fan-out."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable, Sequence

from anyio import to_thread

from fanout.domain.entities import Event

logger = logging.getLogger(__name__)


class EventQueue:
    """FIFO buffer drained by one worker task.

    Live submissions and recovery sweeps feed the same queue, so no two events
    are ever fanned out at the same time. ``handler`` runs in a worker thread
    with its own storage session; the drain loop only waits on it or on an
    empty queue.
    """

    def __init__(
        self,
        handler: Callable[[str], object],
        *,
        recovery_source: Callable[[], Sequence[str]] | None = None,
    ) -> None:
        self._handler = handler
        self._recovery_source = recovery_source
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._pending: set[str] = set()
        self._pending_lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._worker: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending_count(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    def start(self) -> None:
        """Start the drain task on the running event loop."""

        if self.is_running:
            return
        self._loop = asyncio.get_running_loop()
        self._worker = self._loop.create_task(self._drain(), name="event-queue-drain")

    def submit(self, event: Event) -> bool:
        """Enqueue ``event`` without blocking; return ``False`` if already pending."""

        return self.submit_id(event.event_id)

    def submit_id(self, event_id: str) -> bool:
        """Enqueue ``event_id``; safe to call from threads other than the loop's."""

        with self._pending_lock:
            if event_id in self._pending:
                logger.debug("Event %s already queued", event_id)
                return False
            self._pending.add(event_id)
        if self._loop is not None and not self._on_loop_thread():
            # asyncio.Queue is not thread-safe; the loop must perform the put.
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event_id)
        else:
            self._queue.put_nowait(event_id)
        return True

    def _on_loop_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    async def schedule_recovery(self) -> int:
        """Queue every recoverable event behind the live submissions."""

        if self._recovery_source is None:
            return 0
        event_ids = await to_thread.run_sync(self._recovery_source)
        queued = sum(1 for event_id in event_ids if self.submit_id(event_id))
        logger.info("Queued %d unprocessed events for recovery", queued)
        return queued

    async def join(self) -> None:
        """Wait until every queued event has been handled."""

        await self._queue.join()

    async def stop(self, *, drain: bool = True) -> None:
        if self._worker is None:
            return
        if drain and self.is_running:
            await self.join()
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None
        self._loop = None

    async def _drain(self) -> None:
        while True:
            event_id = await self._queue.get()
            try:
                await to_thread.run_sync(self._handler, event_id)
            except Exception:
                logger.exception("Error processing event %s from queue", event_id)
            finally:
                with self._pending_lock:
                    self._pending.discard(event_id)
                self._queue.task_done()


__all__ = ["EventQueue"]
