"""Notification Event Entity.

Human-facing record of one lifecycle signal. Only the read flag ever changes.
"""

from dataclasses import dataclass
from typing import Any

from app.core.domain.entities import Entity

from ..value_objects.webhook_topic import NotificationTopic, WebhookTopic
from .meeting import MeetingRecord

_TEMPLATES: dict[NotificationTopic, tuple[str, str]] = {
    NotificationTopic.PATIENT_WAITING: (
        "Patient Waiting",
        "Patient has joined the waiting room and is ready to start the consultation.",
    ),
    NotificationTopic.PROVIDER_JOINED: (
        "Provider Joined",
        "Healthcare provider has entered the consultation room.",
    ),
    NotificationTopic.CONSULTATION_STARTED: (
        "Consultation Started",
        "The telehealth consultation has officially begun with both participants present.",
    ),
    NotificationTopic.PROVIDER_LEFT: (
        "Provider Left",
        "Healthcare provider has left the consultation room.",
    ),
    NotificationTopic.CONSULTATION_FINISHED: (
        "Consultation Completed",
        "The telehealth consultation has been completed. Clinical notes have been saved to the patient record.",
    ),
}


@dataclass
class NotificationEvent(Entity[int]):
    """Notificación de la videoconsulta para el profesional."""

    appointment_id: str = ""
    patient_id: str | None = None
    encounter_id: str | None = None
    backend_meeting_id: str | None = None
    topic: NotificationTopic = NotificationTopic.BACKEND_EVENT
    title: str = ""
    message: str = ""
    patient_display_name: str = ""
    is_read: bool = False
    assigned_provider_id: str | None = None
    meeting_url: str | None = None

    @classmethod
    def for_meeting(
        cls,
        meeting: MeetingRecord,
        topic: WebhookTopic | None,
        raw_topic: str = "",
    ) -> "NotificationEvent":
        """Build the notification for a webhook received on a meeting.

        Unrecognized backend topics still produce a generic event.
        """
        if topic is None:
            notification_topic = NotificationTopic.BACKEND_EVENT
            title = "Telehealth Update"
            message = f"Received backend event '{raw_topic}'."
        else:
            notification_topic = topic.notification_topic
            title, message = _TEMPLATES[notification_topic]

        return cls(
            appointment_id=meeting.appointment_id,
            patient_id=meeting.patient_id,
            encounter_id=meeting.encounter_id,
            backend_meeting_id=meeting.backend_meeting_id,
            topic=notification_topic,
            title=title,
            message=message,
            patient_display_name=meeting.patient_display_name,
            is_read=False,
            assigned_provider_id=meeting.provider_id,
            meeting_url=meeting.provider_join_url,
        )

    def is_broadcast(self) -> bool:
        return self.assigned_provider_id is None

    def is_visible_to(self, provider_id: str | None) -> bool:
        """Broadcast events reach everybody; no filter sees everything."""
        if provider_id is None or self.is_broadcast():
            return True
        return self.assigned_provider_id == provider_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "appointment_id": self.appointment_id,
            "patient_id": self.patient_id,
            "encounter_id": self.encounter_id,
            "backend_meeting_id": self.backend_meeting_id,
            "topic": self.topic.value,
            "title": self.title,
            "message": self.message,
            "patient_name": self.patient_display_name,
            "is_read": self.is_read,
            "assigned_provider_id": self.assigned_provider_id,
            "meeting_url": self.meeting_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
