"""
Telegram Bot Services.

Best-effort message delivery through the admin and support bots.
"""

from articlehub.telegram.services.notifications import (
    BroadcastSummary,
    NotificationDispatcher,
    NotificationResult,
    NotificationService,
    get_notification_dispatcher,
)

__all__ = [
    "BroadcastSummary",
    "NotificationDispatcher",
    "NotificationResult",
    "NotificationService",
    "get_notification_dispatcher",
]
