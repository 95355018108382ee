"""Telehealth SQLAlchemy models."""

from .models import EncounterNoteModel, MeetingModel, NotificationModel, ReminderModel, WebhookLogModel

__all__ = [
    "EncounterNoteModel",
    "MeetingModel",
    "NotificationModel",
    "ReminderModel",
    "WebhookLogModel",
]
