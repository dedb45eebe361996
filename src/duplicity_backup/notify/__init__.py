"""Notifications for duplicity-backup runs"""

from duplicity_backup.notify.notifier import (
    NOTIFY_REQUEST_TIMEOUT,
    MonDashResult,
    Notifier,
    SlackMessage,
)

__all__ = [
    "Notifier",
    "MonDashResult",
    "SlackMessage",
    "NOTIFY_REQUEST_TIMEOUT",
]
