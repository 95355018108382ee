# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Ports for the host EHR collaborators (notes, appointment
#              status, invites, webhook audit).
# ============================================================================
"""Host Collaborator Ports.

The bridge decides *that* something happens in the host system and *what* it
contains. How it happens belongs to these adapters.
"""

from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities import MeetingRecord
    from ...domain.services import MeetingInvite


class HostAppointmentStatus(str, Enum):
    """Appointment statuses the bridge pushes to the host."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@runtime_checkable
class IEncounterNoteWriter(Protocol):
    """Creates the clinical note in the patient's encounter."""

    async def create_note(self, meeting: "MeetingRecord", note_text: str) -> int | None:
        """Returns the note id, or None if the host ignored it."""
        ...


@runtime_checkable
class IAppointmentStatusGateway(Protocol):
    """Updates the appointment status in the host calendar."""

    async def update_status(self, appointment_id: str, status: HostAppointmentStatus) -> None:
        ...


@runtime_checkable
class IInviteSender(Protocol):
    """Delivers meeting invites (email/SMS)."""

    async def send_invite(self, invite: "MeetingInvite") -> None:
        ...


@runtime_checkable
class IWebhookAuditLog(Protocol):
    """Records every webhook attempt, valid or not."""

    async def record(self, identifier: str, status: str, message: str) -> None:
        ...
