"""
In-memory implementations of the telehealth ports.

They honour the same contracts as the SQLAlchemy repositories (conditional
status updates, insert-or-fetch on appointment_id) so use cases can be tested
without a database.
"""

from dataclasses import replace
from typing import Any

from app.domains.telehealth.application.dto import BackendMeeting
from app.domains.telehealth.application.ports import DEFAULT_UNREAD_LIMIT, HostAppointmentStatus
from app.domains.telehealth.domain.entities import MeetingRecord, NotificationEvent
from app.domains.telehealth.domain.services import MeetingInvite
from app.domains.telehealth.domain.value_objects import MeetingStatus, ReminderKind


class InMemoryMeetingRepository:
    def __init__(self, *meetings: MeetingRecord):
        self.rows: dict[int, MeetingRecord] = {}
        self.insert_attempts = 0
        for meeting in meetings:
            self.rows[meeting.id] = replace(meeting)

    def _next_id(self) -> int:
        return max(self.rows, default=0) + 1

    def get(self, meeting_id: int) -> MeetingRecord:
        return self.rows[meeting_id]

    async def find_by_appointment_id(self, appointment_id: str) -> MeetingRecord | None:
        for row in self.rows.values():
            if row.appointment_id == appointment_id:
                return replace(row)
        return None

    async def find_by_identifier(self, identifier: str) -> MeetingRecord | None:
        for row in sorted(self.rows.values(), key=lambda r: r.id):
            if identifier in (row.backend_meeting_id, row.medic_secret, row.patient_secret):
                return replace(row)
        return None

    async def insert_or_get(self, meeting: MeetingRecord) -> tuple[MeetingRecord, bool]:
        self.insert_attempts += 1
        existing = await self.find_by_appointment_id(meeting.appointment_id)
        if existing is not None:
            return existing, False
        stored = replace(meeting, id=self._next_id())
        self.rows[stored.id] = stored
        return replace(stored), True

    async def update_links(self, meeting: MeetingRecord) -> bool:
        row = self.rows[meeting.id]
        if row.status is MeetingStatus.FINISHED:
            return False
        self.rows[meeting.id] = replace(meeting)
        return True

    async def advance_status(
        self,
        meeting_id: int,
        new_status: MeetingStatus,
        allowed_from: list[MeetingStatus],
    ) -> bool:
        row = self.rows.get(meeting_id)
        if row is None or row.status not in allowed_from:
            return False
        row.status = new_status
        return True

    async def mark_finished(self, meeting_id: int, notes: str | None = None) -> bool:
        row = self.rows.get(meeting_id)
        if row is None or row.status is MeetingStatus.FINISHED:
            return False
        row.status = MeetingStatus.FINISHED
        if notes and notes.strip():
            row.clinical_notes = notes.strip()
        return True

    async def update_notes(self, meeting_id: int, notes: str) -> None:
        self.rows[meeting_id].clinical_notes = notes

    async def list_scheduled_between(self, start, end) -> list[MeetingRecord]:
        due = [
            row
            for row in self.rows.values()
            if row.status is not MeetingStatus.FINISHED
            and row.appointment_time is not None
            and start <= row.appointment_time < end
        ]
        return [replace(row) for row in sorted(due, key=lambda r: (r.appointment_time, r.id))]

    async def list_upcoming_with_backend(self, since, provider_id: str | None = None) -> list[MeetingRecord]:
        upcoming = [
            row
            for row in self.rows.values()
            if row.backend_meeting_id
            and row.appointment_time is not None
            and row.appointment_time >= since
            and (not provider_id or row.provider_id == provider_id)
        ]
        return [replace(row) for row in sorted(upcoming, key=lambda r: (r.appointment_time, r.id))]


class InMemoryReminderLog:
    def __init__(self):
        self.claimed: list[tuple[int, str, ReminderKind]] = []

    async def claim(self, meeting_id: int, appointment_id: str, kind: ReminderKind) -> bool:
        if any(m == meeting_id and k is kind for m, _, k in self.claimed):
            return False
        self.claimed.append((meeting_id, appointment_id, kind))
        return True


class InMemoryNotificationRepository:
    def __init__(self):
        self.events: list[NotificationEvent] = []

    async def append(self, event: NotificationEvent) -> NotificationEvent:
        event.id = len(self.events) + 1
        self.events.append(event)
        return event

    async def list_unread(
        self,
        provider_id: str | None = None,
        limit: int = DEFAULT_UNREAD_LIMIT,
    ) -> list[NotificationEvent]:
        visible = [e for e in self.events if not e.is_read and e.is_visible_to(provider_id)]
        visible.sort(key=lambda e: (e.created_at, e.id), reverse=True)
        return visible[:limit]

    async def mark_read(self, notification_ids: list[int]) -> int:
        marked = 0
        for event in self.events:
            if event.id in notification_ids and not event.is_read:
                event.is_read = True
                marked += 1
        return marked


class FakeBackendClient:
    """Remote backend stand-in. Set ``error`` to make create_meeting fail."""

    def __init__(self, configured: bool = True, error: Exception | None = None):
        self.configured = configured
        self.error = error
        self.created: list[dict[str, Any]] = []
        self.detail: dict[str, Any] = {"id": "vc-abc123", "status": "open"}
        self.listings: list[dict[str, Any]] = []
        self.connected = True

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def create_meeting(self, appointment_id: str, provider_name: str, patient_name: str, start_time, **kwargs):
        self.created.append({"appointment_id": appointment_id, "start_time": start_time, **kwargs})
        if self.error is not None:
            raise self.error
        backend_id = f"vc-{appointment_id}"
        return BackendMeeting(
            backend_meeting_id=backend_id,
            medic_id=f"medic-{appointment_id}",
            provider_join_url=f"https://tele.example.org/videoconsultation?id={backend_id}&medic=medic-{appointment_id}",
            patient_join_url=f"https://tele.example.org/videoconsultation?id={backend_id}&patient=patient-{appointment_id}",
            patient_secret=f"patient-{appointment_id}",
            data_url=f"https://tele.example.org/videoconsultation/data?vc={backend_id}",
            valid_from="2026-03-01 15:30:00",
            valid_to="2026-03-08 15:30:00",
        )

    async def get_meeting(self, backend_id: str, medic_id: str) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        return self.detail

    async def list_meetings(self, filters=None, page: int = 1, per_page: int = 20) -> dict[str, Any]:
        self.listings.append({"filters": filters, "page": page, "per_page": per_page})
        if self.error is not None:
            raise self.error
        return {"success": True, "data": [self.detail]}

    async def test_connection(self) -> bool:
        return self.connected


class RecordingNoteWriter:
    def __init__(self):
        self.notes: list[tuple[str, str]] = []
        self.meetings: list[MeetingRecord] = []

    async def create_note(self, meeting: MeetingRecord, note_text: str) -> int | None:
        self.notes.append((meeting.appointment_id, note_text))
        self.meetings.append(meeting)
        return len(self.notes)


class RecordingAppointmentGateway:
    def __init__(self):
        self.updates: list[tuple[str, HostAppointmentStatus]] = []

    async def update_status(self, appointment_id: str, status: HostAppointmentStatus) -> None:
        self.updates.append((appointment_id, status))


class RecordingInviteSender:
    def __init__(self, error: Exception | None = None):
        self.invites: list[MeetingInvite] = []
        self.error = error

    async def send_invite(self, invite: MeetingInvite) -> None:
        if self.error is not None:
            raise self.error
        self.invites.append(invite)


class RecordingAuditLog:
    def __init__(self):
        self.entries: list[tuple[str, str, str]] = []

    async def record(self, identifier: str, status: str, message: str) -> None:
        self.entries.append((identifier, status, message))

    @property
    def statuses(self) -> list[str]:
        return [status for _, status, _ in self.entries]
