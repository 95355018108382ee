"""
Telehealth DTOs.

Data Transfer Objects for the telehealth use cases.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ...domain.entities import MeetingRecord, NotificationEvent
from ...domain.value_objects import MeetingStatus, ReminderKind

# =============================================================================
# Backend DTOs
# =============================================================================


@dataclass(frozen=True)
class BackendMeeting:
    """Normalized meeting returned by the telesalud backend."""

    backend_meeting_id: str
    medic_id: str
    provider_join_url: str
    patient_join_url: str
    patient_secret: str | None = None
    data_url: str | None = None
    valid_from: str | None = None
    valid_to: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


# =============================================================================
# Request DTOs
# =============================================================================


@dataclass(frozen=True)
class EnsureMeetingRequest:
    """Request to make sure an appointment has a meeting."""

    appointment_id: str
    provider_name: str
    patient_name: str
    appointment_time: datetime
    patient_id: str | None = None
    encounter_id: str | None = None
    provider_id: str | None = None
    patient_phone: str | None = None
    link_provider: str | None = None
    regenerate: bool = False


@dataclass(frozen=True)
class AmendNotesRequest:
    """Request to replace the clinical notes of a meeting."""

    appointment_id: str
    notes: str


# =============================================================================
# Result DTOs
# =============================================================================


@dataclass
class UseCaseResult:
    """Generic result for use case operations."""

    success: bool
    data: Any | None = None
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "UseCaseResult":
        """Create successful result."""
        return cls(success=True, data=data)

    @classmethod
    def error(cls, code: str, message: str) -> "UseCaseResult":
        """Create error result."""
        return cls(success=False, error_code=code, error_message=message)


@dataclass(frozen=True)
class EnsureMeetingResult:
    """Outcome of ensure_meeting."""

    meeting: MeetingRecord
    created: bool
    used_fallback: bool = False
    fallback_reason: str | None = None


class IngestOutcome(str, Enum):
    """How a webhook ingestion ended."""

    PROCESSED = "processed"
    INVALID_PAYLOAD = "invalid_payload"
    UNKNOWN_MEETING = "unknown_meeting"


@dataclass(frozen=True)
class IngestResult:
    """Outcome of a webhook ingestion. Never raised, always returned."""

    outcome: IngestOutcome
    message: str
    topic: str | None = None
    identifier: str | None = None
    meeting_id: int | None = None
    status: MeetingStatus | None = None
    status_changed: bool = False
    note_created: bool = False
    notification: NotificationEvent | None = None

    @property
    def success(self) -> bool:
        return self.outcome is IngestOutcome.PROCESSED

    @classmethod
    def invalid_payload(cls, message: str, topic: str | None = None) -> "IngestResult":
        return cls(outcome=IngestOutcome.INVALID_PAYLOAD, message=message, topic=topic)

    @classmethod
    def unknown_meeting(cls, message: str, topic: str, identifier: str) -> "IngestResult":
        return cls(
            outcome=IngestOutcome.UNKNOWN_MEETING,
            message=message,
            topic=topic,
            identifier=identifier,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "outcome": self.outcome.value,
            "message": self.message,
            "topic": self.topic,
            "meeting_id": self.meeting_id,
            "status": self.status.value if self.status else None,
            "status_changed": self.status_changed,
            "note_created": self.note_created,
            "notification_id": self.notification.id if self.notification else None,
        }


@dataclass
class ReminderRunResult:
    """What one reminder run did, per appointment."""

    sent: list[tuple[str, ReminderKind]] = field(default_factory=list)
    already_sent: int = 0
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sent": [{"appointment_id": appointment_id, "kind": kind.value} for appointment_id, kind in self.sent],
            "sent_count": len(self.sent),
            "already_sent": self.already_sent,
            "skipped": self.skipped,
            "failed": self.failed,
        }
