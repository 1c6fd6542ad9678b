"""Recovery sweep for events left unprocessed after a failure."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from fanout.config import get_settings
from fanout.domain.exceptions import EventNotFoundError, SourceUserNotFoundError
from fanout.infrastructure.database import SessionLocal
from fanout.infrastructure.repositories import EventRepository

from .processor import process_event

logger = logging.getLogger(__name__)


@dataclass
class RecoveryReport:
    """Outcome of one recovery sweep."""

    found: int = 0
    processed: int = 0
    notifications_created: int = 0
    failed_event_ids: list[str] = field(default_factory=list)
    exhausted: int = 0
    timed_out: bool = False


def list_recoverable_event_ids(
    session: Session, *, max_attempts: int | None = None
) -> list[str]:
    """Return unprocessed event ids oldest first, excluding exhausted events."""

    if max_attempts is None:
        max_attempts = get_settings().recovery_max_attempts
    repository = EventRepository(session)
    exhausted = repository.count_exhausted(max_attempts=max_attempts)
    if exhausted:
        logger.warning(
            "%d unprocessed events reached %d attempts and will not be retried",
            exhausted,
            max_attempts,
        )
    return [event.event_id for event in repository.list_unprocessed(max_attempts=max_attempts)]


def list_recoverable_event_ids_in_new_session() -> list[str]:
    session = SessionLocal()
    try:
        return list_recoverable_event_ids(session)
    finally:
        session.close()


def recover_unprocessed_events(
    session: Session,
    *,
    max_attempts: int | None = None,
    timeout_seconds: float | None = None,
) -> RecoveryReport:
    """Process every recoverable event sequentially, oldest first.

    Safe to repeat: processed events are skipped by the processor and recent
    duplicates are suppressed by the deduplication gate. When
    ``timeout_seconds`` elapses the remaining events are left for a later sweep.
    """

    if max_attempts is None:
        max_attempts = get_settings().recovery_max_attempts
    repository = EventRepository(session)
    report = RecoveryReport(exhausted=repository.count_exhausted(max_attempts=max_attempts))
    event_ids = [
        event.event_id for event in repository.list_unprocessed(max_attempts=max_attempts)
    ]
    report.found = len(event_ids)
    logger.info("Found %d unprocessed events", report.found)

    deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None
    for event_id in event_ids:
        if deadline is not None and time.monotonic() >= deadline:
            report.timed_out = True
            logger.warning(
                "Recovery sweep timed out after %d of %d events",
                report.processed + len(report.failed_event_ids),
                report.found,
            )
            break
        try:
            created = process_event(session, event_id)
        except (EventNotFoundError, SourceUserNotFoundError) as exc:
            logger.warning("Could not recover event %s: %s", event_id, exc)
            report.failed_event_ids.append(event_id)
            continue
        except Exception:
            session.rollback()
            logger.exception("Error recovering event %s", event_id)
            report.failed_event_ids.append(event_id)
            continue
        report.processed += 1
        report.notifications_created += len(created)

    logger.info(
        "Recovery sweep finished: %d processed, %d failed, %d exhausted",
        report.processed,
        len(report.failed_event_ids),
        report.exhausted,
    )
    return report


__all__ = [
    "RecoveryReport",
    "list_recoverable_event_ids",
    "list_recoverable_event_ids_in_new_session",
    "recover_unprocessed_events",
]
