"""Telehealth Domain Value Objects."""

from .link_provider import LinkProvider
from .meeting_status import MeetingStatus
from .reminder_kind import ReminderKind
from .webhook_topic import NotificationTopic, WebhookTopic

__all__ = [
    "LinkProvider",
    "MeetingStatus",
    "NotificationTopic",
    "ReminderKind",
    "WebhookTopic",
]
