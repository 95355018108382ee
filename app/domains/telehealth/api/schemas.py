"""
Telehealth API Schemas

Pydantic schemas for API request/response validation.
"""

from typing import Any

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from app.domains.telehealth.domain.value_objects import LinkProvider


class EnsureMeetingBody(BaseModel):
    """Ensure meeting request schema."""

    appointment_id: str = Field(..., min_length=1, max_length=64)
    provider_name: str = ""
    patient_name: str = ""
    appointment_time: AwareDatetime
    patient_id: str | None = None
    encounter_id: str | None = None
    provider_id: str | None = None
    patient_phone: str | None = None
    link_provider: str | None = Field(
        default=None, description="telesalud, jitsi, google_meet, doxy_me, doximity or template"
    )
    regenerate: bool = False

    @field_validator("appointment_id", "patient_id", "encounter_id", "provider_id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        # Host ids are usually integers
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("link_provider")
    @classmethod
    def validate_link_provider(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        if value not in {p.value for p in LinkProvider}:
            raise ValueError(f"Unknown link provider: {value}")
        return value


class MeetingResponse(BaseModel):
    """Meeting response schema."""

    id: int | None = None
    appointment_id: str
    patient_id: str | None = None
    encounter_id: str | None = None
    provider_id: str | None = None
    provider_name: str = ""
    patient_name: str = ""
    appointment_time: str | None = None
    link_provider: str
    backend_meeting_id: str | None = None
    provider_join_url: str | None = None
    patient_join_url: str | None = None
    data_url: str | None = None
    valid_from: str | None = None
    valid_to: str | None = None
    status: str
    status_name: str
    clinical_notes: str | None = None
    created_at: str | None = None
    finished_at: str | None = None


class EnsureMeetingResponse(BaseModel):
    success: bool = True
    created: bool
    used_fallback: bool = False
    fallback_reason: str | None = None
    meeting: MeetingResponse


class MeetingDetailResponse(BaseModel):
    success: bool = True
    meeting: MeetingResponse
    can_join: bool
    backend: dict[str, Any] | None = None
    backend_error: dict[str, Any] | None = None


class AmendNotesBody(BaseModel):
    notes: str = Field(..., min_length=1)


class NotificationResponse(BaseModel):
    """Notification response schema."""

    id: int | None = None
    appointment_id: str
    patient_id: str | None = None
    encounter_id: str | None = None
    backend_meeting_id: str | None = None
    topic: str
    title: str
    message: str
    patient_name: str
    is_read: bool
    assigned_provider_id: str | None = None
    meeting_url: str | None = None
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    success: bool = True
    notifications: list[NotificationResponse]
    count: int


class MarkReadBody(BaseModel):
    notification_ids: list[int] = Field(default_factory=list)


class MarkReadResponse(BaseModel):
    success: bool = True
    marked_read: int


class BackendStatusResponse(BaseModel):
    success: bool = True
    connected: bool
    mode: str
    provider: str


class ReminderSentItem(BaseModel):
    appointment_id: str
    kind: str


class ReminderRunResponse(BaseModel):
    success: bool = True
    sent: list[ReminderSentItem]
    sent_count: int
    already_sent: int
    skipped: list[str]
    failed: list[str]
