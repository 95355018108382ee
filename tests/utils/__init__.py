"""Test utilities and helpers."""

from tests.utils.builders import MeetingBuilder, WebhookPayloadBuilder
from tests.utils.fakes import (
    FakeBackendClient,
    InMemoryMeetingRepository,
    InMemoryNotificationRepository,
    InMemoryReminderLog,
    RecordingAppointmentGateway,
    RecordingAuditLog,
    RecordingInviteSender,
    RecordingNoteWriter,
)

__all__ = [
    "FakeBackendClient",
    "InMemoryMeetingRepository",
    "InMemoryNotificationRepository",
    "InMemoryReminderLog",
    "MeetingBuilder",
    "RecordingAppointmentGateway",
    "RecordingAuditLog",
    "RecordingInviteSender",
    "RecordingNoteWriter",
    "WebhookPayloadBuilder",
]
