"""
Test data builders using the Builder pattern.

Provides fluent interfaces for constructing telehealth test objects with
sensible defaults.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from app.domains.telehealth.domain.entities import MeetingRecord
from app.domains.telehealth.domain.value_objects import LinkProvider, MeetingStatus


class MeetingBuilder:
    """Builder for MeetingRecord entities. Defaults to a backend-issued meeting."""

    def __init__(self):
        self._data: dict[str, Any] = {
            "id": 1,
            "appointment_id": "1001",
            "patient_id": "55",
            "encounter_id": "700",
            "provider_id": "9",
            "provider_name": "Dr. Ana Gómez",
            "patient_name": "Juan Pérez",
            "appointment_time": datetime.now(UTC) + timedelta(minutes=30),
            "link_provider": LinkProvider.TELESALUD,
            "backend_meeting_id": "vc-abc123",
            "medic_secret": "medic-secret-1",
            "patient_secret": "patient-secret-1",
            "provider_join_url": "https://tele.example.org/videoconsultation?id=vc-abc123&medic=medic-secret-1",
            "patient_join_url": "https://tele.example.org/videoconsultation?id=vc-abc123&patient=patient-secret-1",
            "status": MeetingStatus.SCHEDULED,
        }

    def with_id(self, meeting_id: int | None) -> "MeetingBuilder":
        self._data["id"] = meeting_id
        return self

    def with_appointment(self, appointment_id: str) -> "MeetingBuilder":
        self._data["appointment_id"] = appointment_id
        return self

    def with_status(self, status: MeetingStatus) -> "MeetingBuilder":
        self._data["status"] = status
        return self

    def with_provider(self, provider_id: str | None) -> "MeetingBuilder":
        self._data["provider_id"] = provider_id
        return self

    def with_patient_name(self, name: str) -> "MeetingBuilder":
        self._data["patient_name"] = name
        return self

    def with_notes(self, notes: str | None) -> "MeetingBuilder":
        self._data["clinical_notes"] = notes
        return self

    def at(self, appointment_time: datetime | None) -> "MeetingBuilder":
        self._data["appointment_time"] = appointment_time
        return self

    def local(self, provider: LinkProvider = LinkProvider.JITSI, slug: str = "a1b2c3d4e5") -> "MeetingBuilder":
        """Meeting built by a standalone link provider."""
        url = f"https://meet.jit.si/EMRTelevisit-{self._data['appointment_id']}-{slug}"
        self._data.update(
            link_provider=provider,
            backend_meeting_id=None,
            medic_secret=slug,
            patient_secret=slug,
            provider_join_url=url,
            patient_join_url=url,
        )
        return self

    def with_validity(self, data_url: str, valid_from: str, valid_to: str) -> "MeetingBuilder":
        self._data.update(data_url=data_url, valid_from=valid_from, valid_to=valid_to)
        return self

    def without_links(self) -> "MeetingBuilder":
        self._data["provider_join_url"] = None
        self._data["patient_join_url"] = None
        return self

    def build(self) -> MeetingRecord:
        return MeetingRecord(**self._data)


class WebhookPayloadBuilder:
    """Builder for telesalud webhook bodies."""

    def __init__(self, topic: str = "patient-set-attendance"):
        self._topic: Any = topic
        self._vc: dict[str, Any] = {"id": "vc-abc123"}

    def topic(self, topic: Any) -> "WebhookPayloadBuilder":
        self._topic = topic
        return self

    def by_id(self, backend_id: str) -> "WebhookPayloadBuilder":
        self._vc = {"id": backend_id}
        return self

    def by_secret(self, secret: str) -> "WebhookPayloadBuilder":
        self._vc = {"secret": secret}
        return self

    def with_evolution(self, evolution: str) -> "WebhookPayloadBuilder":
        self._vc["evolution"] = evolution
        return self

    def build(self) -> dict[str, Any]:
        return {"topic": self._topic, "vc": dict(self._vc)}
