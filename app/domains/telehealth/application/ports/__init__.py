# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Ports (interfaces) for external systems.
# ============================================================================
"""Telehealth Application Ports."""

from .host_ports import (
    HostAppointmentStatus,
    IAppointmentStatusGateway,
    IEncounterNoteWriter,
    IInviteSender,
    IWebhookAuditLog,
)
from .meeting_repository import IMeetingRepository
from .notification_repository import DEFAULT_UNREAD_LIMIT, INotificationRepository
from .reminder_log import IReminderLog
from .remote_backend_port import IRemoteBackendClient

__all__ = [
    "DEFAULT_UNREAD_LIMIT",
    "HostAppointmentStatus",
    "IAppointmentStatusGateway",
    "IEncounterNoteWriter",
    "IInviteSender",
    "IMeetingRepository",
    "INotificationRepository",
    "IReminderLog",
    "IRemoteBackendClient",
    "IWebhookAuditLog",
]
