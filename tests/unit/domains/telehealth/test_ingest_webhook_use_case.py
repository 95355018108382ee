"""
Unit tests for IngestWebhookUseCase.

Covers payload validation, meeting resolution, the monotonic status machine,
finish idempotence and the one-notification-per-webhook rule.
"""

from unittest.mock import ANY, patch

import pytest

from app.domains.telehealth.application.dto import IngestOutcome
from app.domains.telehealth.application.ports import HostAppointmentStatus
from app.domains.telehealth.application.use_cases import IngestWebhookUseCase
from app.domains.telehealth.domain.entities import MeetingRecord
from app.domains.telehealth.domain.value_objects import MeetingStatus, NotificationTopic
from tests.utils import (
    InMemoryMeetingRepository,
    InMemoryNotificationRepository,
    MeetingBuilder,
    RecordingAppointmentGateway,
    RecordingAuditLog,
    RecordingNoteWriter,
    WebhookPayloadBuilder,
)


@pytest.fixture
def meeting():
    return MeetingBuilder().build()


@pytest.fixture
def meeting_repository(meeting):
    return InMemoryMeetingRepository(meeting)


def payload(topic: str, **kwargs) -> dict:
    builder = WebhookPayloadBuilder(topic)
    if "secret" in kwargs:
        builder.by_secret(kwargs["secret"])
    if "evolution" in kwargs:
        builder.with_evolution(kwargs["evolution"])
    return builder.build()


@pytest.mark.unit
class TestIngestWebhookValidation:
    @pytest.mark.parametrize(
        "body",
        [
            None,
            [],
            "patient-set-attendance",
            {"vc": {"id": "vc-abc123"}},
            {"topic": "  ", "vc": {"id": "vc-abc123"}},
            {"topic": "patient-set-attendance"},
            {"topic": "patient-set-attendance", "vc": "vc-abc123"},
            {"topic": "patient-set-attendance", "vc": {"evolution": "x"}},
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_payload(self, ingest_webhook_use_case, notification_repository, audit_log, body):
        result = await ingest_webhook_use_case.execute(body)

        assert result.outcome is IngestOutcome.INVALID_PAYLOAD
        assert not result.success
        assert notification_repository.events == []
        assert audit_log.entries[-1][:2] == ("unknown", "error")

    @pytest.mark.asyncio
    async def test_unknown_meeting(self, ingest_webhook_use_case, notification_repository, audit_log):
        result = await ingest_webhook_use_case.execute(WebhookPayloadBuilder().by_id("vc-missing").build())

        assert result.outcome is IngestOutcome.UNKNOWN_MEETING
        assert result.identifier == "vc-missing"
        assert notification_repository.events == []
        assert audit_log.statuses == ["received", "error"]

    @pytest.mark.asyncio
    async def test_numeric_zero_id_is_an_identifier(self, ingest_webhook_use_case):
        result = await ingest_webhook_use_case.execute({"topic": "patient-set-attendance", "vc": {"id": 0}})

        assert result.outcome is IngestOutcome.UNKNOWN_MEETING
        assert result.identifier == "0"

    @pytest.mark.asyncio
    async def test_blank_id_falls_back_to_secret(self, ingest_webhook_use_case, meeting):
        body = {"topic": "patient-set-attendance", "vc": {"id": "  ", "secret": "patient-secret-1"}}

        result = await ingest_webhook_use_case.execute(body)

        assert result.meeting_id == meeting.id

    @pytest.mark.asyncio
    async def test_zero_id_resolves_stored_meeting(self):
        meeting = MeetingBuilder().build()
        meeting.backend_meeting_id = "0"
        use_case = IngestWebhookUseCase(
            InMemoryMeetingRepository(meeting),
            InMemoryNotificationRepository(),
            RecordingNoteWriter(),
            RecordingAppointmentGateway(),
            RecordingAuditLog(),
        )

        result = await use_case.execute({"topic": "patient-set-attendance", "vc": {"id": 0}})

        assert result.outcome is IngestOutcome.PROCESSED
        assert result.meeting_id == meeting.id


@pytest.mark.unit
class TestIngestWebhookTransitions:
    @pytest.mark.asyncio
    async def test_patient_attendance_moves_to_patient_joined(
        self, ingest_webhook_use_case, meeting_repository, notification_repository, meeting
    ):
        result = await ingest_webhook_use_case.execute(payload("patient-set-attendance"))

        assert result.outcome is IngestOutcome.PROCESSED
        assert result.status_changed
        assert meeting_repository.get(meeting.id).status is MeetingStatus.PATIENT_JOINED
        assert [e.topic for e in notification_repository.events] == [NotificationTopic.PATIENT_WAITING]
        assert result.notification.id == 1

    @pytest.mark.asyncio
    async def test_resolves_by_either_secret(self, ingest_webhook_use_case, meeting_repository, meeting):
        result = await ingest_webhook_use_case.execute(payload("medic-set-attendance", secret="medic-secret-1"))
        assert result.meeting_id == meeting.id
        result = await ingest_webhook_use_case.execute(payload("patient-set-attendance", secret="patient-secret-1"))
        assert result.meeting_id == meeting.id

    @pytest.mark.asyncio
    async def test_started_updates_host_appointment(
        self, ingest_webhook_use_case, meeting_repository, appointment_gateway, meeting
    ):
        await ingest_webhook_use_case.execute(payload("videoconsultation-started"))

        assert meeting_repository.get(meeting.id).status is MeetingStatus.IN_PROGRESS
        assert appointment_gateway.updates == [(meeting.appointment_id, HostAppointmentStatus.IN_PROGRESS)]

    @pytest.mark.asyncio
    async def test_late_attendance_never_regresses(
        self, ingest_webhook_use_case, meeting_repository, notification_repository, meeting
    ):
        await ingest_webhook_use_case.execute(payload("videoconsultation-started"))
        result = await ingest_webhook_use_case.execute(payload("patient-set-attendance"))

        assert not result.status_changed
        assert result.status is MeetingStatus.IN_PROGRESS
        assert meeting_repository.get(meeting.id).status is MeetingStatus.IN_PROGRESS
        assert len(notification_repository.events) == 2

    @pytest.mark.asyncio
    async def test_transition_goes_through_entity(self, ingest_webhook_use_case):
        advance_to = MeetingRecord.advance_to
        with patch.object(MeetingRecord, "advance_to", autospec=True, side_effect=advance_to) as spy:
            result = await ingest_webhook_use_case.execute(payload("videoconsultation-started"))
            await ingest_webhook_use_case.execute(payload("patient-set-attendance"))

        spy.assert_called_once_with(ANY, MeetingStatus.IN_PROGRESS)
        assert result.status is MeetingStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_provider_left_keeps_status(self, ingest_webhook_use_case, meeting_repository, meeting):
        await ingest_webhook_use_case.execute(payload("medic-set-attendance"))
        result = await ingest_webhook_use_case.execute(payload("medic-unset-attendance"))

        assert not result.status_changed
        assert meeting_repository.get(meeting.id).status is MeetingStatus.PROVIDER_JOINED
        assert result.notification.topic is NotificationTopic.PROVIDER_LEFT

    @pytest.mark.asyncio
    async def test_unknown_topic_creates_backend_event(
        self, ingest_webhook_use_case, meeting_repository, notification_repository, meeting
    ):
        result = await ingest_webhook_use_case.execute(payload("videoconsultation-recording-ready"))

        assert result.outcome is IngestOutcome.PROCESSED
        assert not result.status_changed
        assert meeting_repository.get(meeting.id).status is MeetingStatus.SCHEDULED
        assert notification_repository.events[0].topic is NotificationTopic.BACKEND_EVENT

    @pytest.mark.asyncio
    async def test_notification_assigned_to_meeting_provider(self, ingest_webhook_use_case, notification_repository):
        await ingest_webhook_use_case.execute(payload("patient-set-attendance"))
        assert notification_repository.events[0].assigned_provider_id == "9"


@pytest.mark.unit
class TestIngestWebhookFinish:
    @pytest.mark.asyncio
    async def test_finish_writes_note_once(
        self, ingest_webhook_use_case, meeting_repository, note_writer, appointment_gateway, notification_repository, meeting
    ):
        body = payload("videoconsultation-finished", evolution="Paciente estable. Control en 7 días.")

        first = await ingest_webhook_use_case.execute(body)
        second = await ingest_webhook_use_case.execute(body)

        assert first.status_changed and first.note_created
        assert not second.status_changed and not second.note_created
        assert len(note_writer.notes) == 1
        assert "Paciente estable. Control en 7 días." in note_writer.notes[0][1]
        assert "Notes Source: Real-time" in note_writer.notes[0][1]
        assert appointment_gateway.updates == [(meeting.appointment_id, HostAppointmentStatus.COMPLETED)]
        assert len(notification_repository.events) == 2

        stored = meeting_repository.get(meeting.id)
        assert stored.status is MeetingStatus.FINISHED
        assert stored.clinical_notes == "Paciente estable. Control en 7 días."

    @pytest.mark.asyncio
    async def test_note_is_built_from_finished_entity(self, ingest_webhook_use_case, note_writer):
        await ingest_webhook_use_case.execute(payload("videoconsultation-finished", evolution=" Alta médica "))

        finished = note_writer.meetings[0]
        assert finished.status is MeetingStatus.FINISHED
        assert finished.finished_at is not None
        assert finished.clinical_notes == "Alta médica"
        assert finished.version == 1

    @pytest.mark.asyncio
    async def test_finish_without_payload_notes_uses_stored_notes(self, note_writer):
        meeting = MeetingBuilder().with_notes("Notas guardadas").build()
        repository = InMemoryMeetingRepository(meeting)
        use_case = IngestWebhookUseCase(
            repository,
            InMemoryNotificationRepository(),
            note_writer,
            RecordingAppointmentGateway(),
            RecordingAuditLog(),
        )

        await use_case.execute(payload("videoconsultation-finished", evolution="   "))

        assert repository.get(meeting.id).clinical_notes == "Notas guardadas"
        assert "Notas guardadas" in note_writer.notes[0][1]
        assert "Notes Source: Database" in note_writer.notes[0][1]

    @pytest.mark.asyncio
    async def test_finish_without_any_notes(self, ingest_webhook_use_case, note_writer):
        await ingest_webhook_use_case.execute(payload("videoconsultation-finished"))

        assert note_writer.notes[0][1].startswith("TELEHEALTH CONSULTATION COMPLETED")

    @pytest.mark.asyncio
    async def test_events_after_finish_do_not_change_status(self, ingest_webhook_use_case, meeting_repository, meeting):
        await ingest_webhook_use_case.execute(payload("videoconsultation-finished"))
        result = await ingest_webhook_use_case.execute(payload("videoconsultation-started"))

        assert not result.status_changed
        assert meeting_repository.get(meeting.id).status is MeetingStatus.FINISHED

    @pytest.mark.asyncio
    async def test_audit_trail(self, ingest_webhook_use_case, audit_log):
        await ingest_webhook_use_case.execute(payload("patient-set-attendance"))

        assert audit_log.statuses == ["received", "processed"]
        assert audit_log.entries[0] == ("vc-abc123", "received", "Processing notification: patient-set-attendance")
