"""Telehealth Application Use Cases."""

from .amend_notes import AmendClinicalNotesUseCase
from .check_backend import CheckBackendConnectionUseCase, ListBackendMeetingsUseCase
from .ensure_meeting import EnsureMeetingUseCase
from .get_meeting import GetMeetingUseCase
from .ingest_webhook import IngestWebhookUseCase
from .notifications import ListUnreadNotificationsUseCase, MarkNotificationsReadUseCase
from .send_reminders import SendRemindersUseCase
from .upcoming_meetings import ListUpcomingMeetingsUseCase

__all__ = [
    "AmendClinicalNotesUseCase",
    "CheckBackendConnectionUseCase",
    "EnsureMeetingUseCase",
    "GetMeetingUseCase",
    "IngestWebhookUseCase",
    "ListBackendMeetingsUseCase",
    "ListUnreadNotificationsUseCase",
    "ListUpcomingMeetingsUseCase",
    "MarkNotificationsReadUseCase",
    "SendRemindersUseCase",
]
