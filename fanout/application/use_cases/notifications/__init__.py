"""Fan-out of events into notifications and the reader-side operations."""

from .content import build_notification_url, render_notification_content
from .inbox import (
    dismiss_notification,
    get_notification_stats,
    get_unread_count,
    list_recent_notifications,
    list_user_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from .processor import process_event, process_event_in_new_session
from .recipients import filter_by_preferences, resolve_candidate_ids
from .recovery import (
    RecoveryReport,
    list_recoverable_event_ids,
    list_recoverable_event_ids_in_new_session,
    recover_unprocessed_events,
)
from .retention import (
    MaintenanceReport,
    expire_records,
    purge_stale_notifications,
    run_maintenance,
    run_maintenance_in_new_session,
)
from .writer import write_notification

__all__ = [
    "build_notification_url",
    "render_notification_content",
    "dismiss_notification",
    "get_notification_stats",
    "get_unread_count",
    "list_recent_notifications",
    "list_user_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "process_event",
    "process_event_in_new_session",
    "filter_by_preferences",
    "resolve_candidate_ids",
    "RecoveryReport",
    "list_recoverable_event_ids",
    "list_recoverable_event_ids_in_new_session",
    "recover_unprocessed_events",
    "MaintenanceReport",
    "expire_records",
    "purge_stale_notifications",
    "run_maintenance",
    "run_maintenance_in_new_session",
    "write_notification",
]
