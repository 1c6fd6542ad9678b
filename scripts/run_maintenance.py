"""Run the recovery sweep and the retention sweep once.

Safe to run while the service is up: events the service queue is processing
hold a lease and are skipped by this sweep.
"""

from __future__ import annotations

import argparse

from fanout.application.use_cases.notifications import (
    recover_unprocessed_events,
    run_maintenance,
)
from fanout.infrastructure.database import SessionLocal, initialize_database
from fanout.logging_config import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recover unprocessed events and purge old notifications.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Stop recovering after this many seconds (remaining events wait for the next run).",
    )
    parser.add_argument("--skip-recovery", action="store_true", help="Only run the retention sweep.")
    parser.add_argument("--skip-retention", action="store_true", help="Only run the recovery sweep.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    setup_logging()
    initialize_database()

    session = SessionLocal()
    try:
        if not args.skip_recovery:
            report = recover_unprocessed_events(session, timeout_seconds=args.timeout)
            print(
                f"Recovered {report.processed}/{report.found} events, "
                f"{report.notifications_created} notifications, "
                f"{len(report.failed_event_ids)} failed, {report.exhausted} exhausted"
            )
        if not args.skip_retention:
            maintenance = run_maintenance(session)
            print(
                f"Deleted {maintenance.stale_notifications_deleted} old notifications, "
                f"expired {maintenance.expired_notifications_deleted} notifications "
                f"and {maintenance.expired_events_deleted} events"
            )
    finally:
        session.close()


if __name__ == "__main__":
    main()
