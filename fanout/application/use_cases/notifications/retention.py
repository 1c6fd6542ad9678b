"""Retention sweep and storage expiry housekeeping."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from fanout.config import get_settings
from fanout.domain.entities import NOTIFICATION_STATUS_DISMISSED, NOTIFICATION_STATUS_READ
from fanout.infrastructure.database import SessionLocal
from fanout.infrastructure.repositories import EventRepository, NotificationRepository
from fanout.utils import utc_now

logger = logging.getLogger(__name__)

_TERMINAL_STATUSES = (NOTIFICATION_STATUS_READ, NOTIFICATION_STATUS_DISMISSED)


@dataclass
class MaintenanceReport:
    """Row counts removed by one maintenance run."""

    stale_notifications_deleted: int = 0
    expired_notifications_deleted: int = 0
    expired_events_deleted: int = 0


def purge_stale_notifications(
    session: Session,
    *,
    now: datetime | None = None,
    retention_days: int | None = None,
) -> int:
    """Delete read or dismissed notifications older than the retention horizon.

    Unread notifications are never touched here, whatever their age.
    """

    if retention_days is None:
        retention_days = get_settings().notification_retention_days
    cutoff = (now or utc_now()) - timedelta(days=retention_days)
    deleted = NotificationRepository(session).delete_older_than(
        cutoff, statuses=_TERMINAL_STATUSES
    )
    logger.info("Cleaned up %d old notifications", deleted)
    return deleted


def expire_records(session: Session, *, now: datetime | None = None) -> tuple[int, int]:
    """Apply storage expiry to notifications and processed events past ``expires_at``."""

    reference = now or utc_now()
    notifications = NotificationRepository(session).delete_expired(reference)
    events = EventRepository(session).delete_expired(reference)
    if notifications or events:
        logger.info("Expired %d notifications and %d events", notifications, events)
    return notifications, events


def run_maintenance(session: Session, *, now: datetime | None = None) -> MaintenanceReport:
    reference = now or utc_now()
    report = MaintenanceReport()
    report.stale_notifications_deleted = purge_stale_notifications(session, now=reference)
    (
        report.expired_notifications_deleted,
        report.expired_events_deleted,
    ) = expire_records(session, now=reference)
    return report


def run_maintenance_in_new_session() -> MaintenanceReport:
    session = SessionLocal()
    try:
        return run_maintenance(session)
    finally:
        session.close()


__all__ = [
    "MaintenanceReport",
    "expire_records",
    "purge_stale_notifications",
    "run_maintenance",
    "run_maintenance_in_new_session",
]
