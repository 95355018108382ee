"""Telehealth Repository Implementations."""

from .meeting_repository import SQLAlchemyMeetingRepository
from .notification_repository import SQLAlchemyNotificationRepository
from .reminder_log_repository import SQLAlchemyReminderLog
from .webhook_log_repository import SQLAlchemyWebhookAuditLog

__all__ = [
    "SQLAlchemyMeetingRepository",
    "SQLAlchemyNotificationRepository",
    "SQLAlchemyReminderLog",
    "SQLAlchemyWebhookAuditLog",
]
