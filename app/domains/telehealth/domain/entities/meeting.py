"""Meeting Record Entity - Aggregate Root.

One videoconference per appointment, created either by the telesalud backend
or by a local link provider.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from app.core.domain.entities import AggregateRoot
from app.core.domain.exceptions import InvalidOperationException

from ..value_objects.link_provider import LinkProvider
from ..value_objects.meeting_status import MeetingStatus

UNKNOWN_PATIENT = "Unknown Patient"


@dataclass
class MeetingRecord(AggregateRoot[int]):
    """Videoconsulta de un turno - Aggregate Root.

    backend_meeting_id is set iff the links were issued by the remote backend.
    Once finished, only the clinical notes may change.
    """

    # Host references
    appointment_id: str = ""
    patient_id: str | None = None
    encounter_id: str | None = None
    provider_id: str | None = None

    # Participants
    provider_name: str = ""
    patient_name: str = ""
    appointment_time: datetime | None = None

    # Links
    link_provider: LinkProvider = LinkProvider.JITSI
    backend_meeting_id: str | None = None
    medic_secret: str | None = None
    patient_secret: str | None = None
    provider_join_url: str | None = None
    patient_join_url: str | None = None
    data_url: str | None = None
    valid_from: str | None = None
    valid_to: str | None = None

    # Lifecycle
    status: MeetingStatus = MeetingStatus.SCHEDULED
    clinical_notes: str | None = None
    finished_at: datetime | None = None

    @classmethod
    def create(
        cls,
        appointment_id: str,
        link_provider: LinkProvider,
        provider_join_url: str,
        patient_join_url: str,
        provider_name: str = "",
        patient_name: str = "",
        appointment_time: datetime | None = None,
        patient_id: str | None = None,
        encounter_id: str | None = None,
        provider_id: str | None = None,
        backend_meeting_id: str | None = None,
        medic_secret: str | None = None,
        patient_secret: str | None = None,
        data_url: str | None = None,
        valid_from: str | None = None,
        valid_to: str | None = None,
    ) -> "MeetingRecord":
        """Factory method for a freshly scheduled meeting.

        Raises:
            ValueError: If the backend id does not agree with the link provider.
        """
        if link_provider.is_local and backend_meeting_id:
            raise ValueError("Local meetings cannot carry a backend meeting id")
        if not link_provider.is_local and not backend_meeting_id:
            raise ValueError("Backend meetings require a backend meeting id")

        return cls(
            appointment_id=appointment_id,
            patient_id=patient_id,
            encounter_id=encounter_id,
            provider_id=provider_id,
            provider_name=provider_name,
            patient_name=patient_name,
            appointment_time=appointment_time,
            link_provider=link_provider,
            backend_meeting_id=backend_meeting_id,
            medic_secret=medic_secret,
            patient_secret=patient_secret,
            provider_join_url=provider_join_url,
            patient_join_url=patient_join_url,
            data_url=data_url,
            valid_from=valid_from,
            valid_to=valid_to,
            status=MeetingStatus.SCHEDULED,
        )

    # Queries
    def has_join_urls(self) -> bool:
        return bool(self.provider_join_url) and bool(self.patient_join_url)

    def is_local(self) -> bool:
        return self.backend_meeting_id is None

    def is_finished(self) -> bool:
        return self.status.is_final()

    @property
    def patient_display_name(self) -> str:
        return self.patient_name.strip() or UNKNOWN_PATIENT

    def can_join(self, now: datetime | None = None, window: timedelta | None = None) -> bool:
        """Verificar si la sala está dentro de la ventana de ingreso.

        A zero or missing window, or a meeting without appointment time,
        never blocks joining. Finished meetings cannot be joined.
        """
        if self.is_finished():
            return False
        if not window or self.appointment_time is None:
            return True
        now = now or datetime.now(UTC)
        return abs(now - self.appointment_time) <= window

    # Transitions
    def advance_to(self, new_status: MeetingStatus) -> bool:
        """Move forward in the lifecycle. Returns False when the move is not allowed."""
        if not self.status.can_transition_to(new_status):
            return False
        self.status = new_status
        if new_status is MeetingStatus.FINISHED:
            self.finished_at = datetime.now(UTC)
        self.increment_version()
        return True

    def finish(self, notes: str | None = None) -> bool:
        """Finish the meeting, keeping stored notes when none are supplied."""
        if not self.advance_to(MeetingStatus.FINISHED):
            return False
        if notes and notes.strip():
            self.clinical_notes = notes.strip()
        return True

    def amend_notes(self, notes: str) -> None:
        """Replace the clinical notes.

        Raises:
            ValueError: If the notes are empty.
        """
        if not notes or not notes.strip():
            raise ValueError("Clinical notes cannot be empty")
        self.clinical_notes = notes.strip()
        self.touch()

    def replace_links(
        self,
        link_provider: LinkProvider,
        provider_join_url: str,
        patient_join_url: str,
        backend_meeting_id: str | None = None,
        medic_secret: str | None = None,
        patient_secret: str | None = None,
        data_url: str | None = None,
        valid_from: str | None = None,
        valid_to: str | None = None,
    ) -> None:
        """Explicit regeneration of the join links.

        Every link field is replaced, so backend extras left over from a
        previous telesalud meeting are cleared when local links are issued.

        Raises:
            InvalidOperationException: If the meeting already finished.
        """
        if self.is_finished():
            raise InvalidOperationException("replace_links", self.status.value)
        self.link_provider = link_provider
        self.provider_join_url = provider_join_url
        self.patient_join_url = patient_join_url
        self.backend_meeting_id = backend_meeting_id
        self.medic_secret = medic_secret
        self.patient_secret = patient_secret
        self.data_url = data_url
        self.valid_from = valid_from
        self.valid_to = valid_to
        self.increment_version()

    # Serialization
    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "appointment_id": self.appointment_id,
            "patient_id": self.patient_id,
            "encounter_id": self.encounter_id,
            "provider_id": self.provider_id,
            "provider_name": self.provider_name,
            "patient_name": self.patient_display_name,
            "appointment_time": self.appointment_time.isoformat() if self.appointment_time else None,
            "link_provider": self.link_provider.value,
            "backend_meeting_id": self.backend_meeting_id,
            "provider_join_url": self.provider_join_url,
            "patient_join_url": self.patient_join_url,
            "data_url": self.data_url,
            "valid_from": self.valid_from,
            "valid_to": self.valid_to,
            "status": self.status.value,
            "status_name": self.status.display_name,
            "clinical_notes": self.clinical_notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
