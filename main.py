import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from anyio import to_thread
from fastapi import FastAPI

from fanout.application.use_cases.notifications import (
    list_recoverable_event_ids_in_new_session,
    process_event_in_new_session,
    run_maintenance_in_new_session,
)
from fanout.config import get_settings
from fanout.infrastructure.database import engine, initialize_database
from fanout.infrastructure.queue import EventQueue
from fanout.interfaces.api.routes import register_routes
from fanout.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def _run_periodic_maintenance(interval_seconds: int) -> None:
    """Run the retention sweep every ``interval_seconds``."""

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await to_thread.run_sync(run_maintenance_in_new_session)
        except Exception:
            logger.exception("Periodic maintenance failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, start the event queue and stop it on shutdown."""

    settings = get_settings()
    setup_logging(settings)
    initialize_database()

    queue = EventQueue(
        process_event_in_new_session,
        recovery_source=list_recoverable_event_ids_in_new_session,
    )
    queue.start()
    app.state.event_queue = queue
    if settings.recovery_on_startup:
        await queue.schedule_recovery()

    maintenance_task = None
    if settings.maintenance_interval_seconds:
        maintenance_task = asyncio.create_task(
            _run_periodic_maintenance(settings.maintenance_interval_seconds)
        )

    try:
        yield
    finally:
        if maintenance_task is not None:
            maintenance_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await maintenance_task
        await queue.stop()
        app.state.event_queue = None
        engine.dispose()


def create_app() -> FastAPI:
    """Build the FastAPI application."""

    app = FastAPI(title="Fan-out Notifications", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
