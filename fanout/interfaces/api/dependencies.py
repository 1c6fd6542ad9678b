"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from fanout.infrastructure.queue import EventQueue


def get_event_queue(request: Request) -> EventQueue:
    """Return the queue started by the application lifespan."""

    queue = getattr(request.app.state, "event_queue", None)
    if queue is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Event queue is not running",
        )
    return queue
