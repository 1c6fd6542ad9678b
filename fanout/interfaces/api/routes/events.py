"""Endpoints for submitting and inspecting events."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fanout.application.use_cases.events import (
    create_event as create_event_uc,
    delete_event as delete_event_uc,
    get_event as get_event_uc,
    get_event_stats as get_event_stats_uc,
    list_events as list_events_uc,
    list_user_events as list_user_events_uc,
)
from fanout.domain.entities import Event
from fanout.domain.exceptions import EventNotFoundError
from fanout.infrastructure.database import get_db
from fanout.infrastructure.queue import EventQueue
from fanout.interfaces.api.dependencies import get_event_queue
from fanout.interfaces.api.schemas import (
    EventAccepted,
    EventCreate,
    EventCreateResponse,
    EventListResponse,
    EventRead,
    EventTypeStats,
    RecoveryResponse,
    UserEventListResponse,
)

router = APIRouter(prefix="/events", tags=["events"])
logger = logging.getLogger(__name__)


def _event_to_read_model(event: Event) -> EventRead:
    return EventRead.model_validate(event, from_attributes=True)


@router.post("/", response_model=EventCreateResponse, status_code=status.HTTP_201_CREATED)
def submit_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    queue: EventQueue = Depends(get_event_queue),
) -> EventCreateResponse:
    """Record an event and queue it for fan-out; acknowledges acceptance only."""

    try:
        event = create_event_uc(
            db,
            event_type=payload.type,
            source_user_id=payload.source_user_id,
            target_user_id=payload.target_user_id,
            data=payload.data.model_dump(),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    queue.submit(event)
    logger.info("Event %s accepted: %s from %s", event.event_id, event.type, event.source_user_id)
    return EventCreateResponse(
        message="Event created successfully",
        event=EventAccepted(event_id=event.event_id, type=event.type, timestamp=event.timestamp),
    )


@router.get("/", response_model=EventListResponse)
def list_events(
    type: str | None = Query(default=None),
    processed: bool | None = Query(default=None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
) -> EventListResponse:
    """List recent events with per-type processing statistics."""

    try:
        events = list_events_uc(db, event_type=type, processed=processed, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    stats = [EventTypeStats(**entry) for entry in get_event_stats_uc(db)]
    return EventListResponse(
        events=[_event_to_read_model(event) for event in events],
        count=len(events),
        stats=stats,
    )


@router.get("/users/{user_id}", response_model=UserEventListResponse)
def list_user_events(
    user_id: str,
    type: str | None = Query(default=None),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
) -> UserEventListResponse:
    try:
        events = list_user_events_uc(db, user_id, event_type=type, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return UserEventListResponse(
        events=[_event_to_read_model(event) for event in events],
        count=len(events),
        user_id=user_id,
    )


@router.post("/recovery", response_model=RecoveryResponse, status_code=status.HTTP_202_ACCEPTED)
async def schedule_recovery(queue: EventQueue = Depends(get_event_queue)) -> RecoveryResponse:
    """Queue unprocessed events behind live submissions."""

    queued = await queue.schedule_recovery()
    return RecoveryResponse(message="Recovery sweep scheduled", queued=queued)


@router.get("/{event_id}", response_model=EventRead)
def read_event(event_id: str, db: Session = Depends(get_db)) -> EventRead:
    try:
        event = get_event_uc(db, event_id)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _event_to_read_model(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, db: Session = Depends(get_db)) -> None:
    try:
        delete_event_uc(db, event_id)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
