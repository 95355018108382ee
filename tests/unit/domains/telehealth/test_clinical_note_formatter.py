"""Unit tests for the encounter note text and the patient invite."""

from datetime import UTC, datetime

import pytest

from app.domains.telehealth.domain.services import ClinicalNoteFormatter, MeetingInvite
from tests.utils import MeetingBuilder

COMPLETED = datetime(2026, 3, 1, 16, 5, 30, tzinfo=UTC)


@pytest.mark.unit
class TestClinicalNoteFormatter:
    def test_note_with_payload_notes(self):
        meeting = MeetingBuilder().build()

        text = ClinicalNoteFormatter().format(meeting, "  Dolor lumbar leve.  ", True, completed_at=COMPLETED)

        assert text.startswith("TELEHEALTH CONSULTATION NOTES\n")
        assert "\nDolor lumbar leve.\n" in text
        assert "- Consultation ID: vc-abc123" in text
        assert "- Completed: 2026-03-01 16:05:30" in text
        assert "- Notes Source: Real-time" in text
        assert text.endswith("\n")

    def test_note_with_stored_notes(self):
        text = ClinicalNoteFormatter().format(MeetingBuilder().build(), "Control", False, completed_at=COMPLETED)

        assert "- Notes Source: Database" in text

    @pytest.mark.parametrize("notes", [None, "", "   "])
    def test_note_without_notes(self, notes):
        text = ClinicalNoteFormatter().format(MeetingBuilder().build(), notes, False, completed_at=COMPLETED)

        assert text.startswith("TELEHEALTH CONSULTATION COMPLETED\n")
        assert "No clinical notes were captured during this consultation." in text
        assert "Notes Source" not in text

    def test_local_meeting_uses_appointment_id(self):
        meeting = MeetingBuilder().with_appointment("2002").local().build()

        text = ClinicalNoteFormatter().format(meeting, None, False, completed_at=COMPLETED)

        assert "- Consultation ID: 2002" in text


@pytest.mark.unit
class TestMeetingInvite:
    def test_invite_carries_patient_link(self):
        meeting = MeetingBuilder().build()

        invite = MeetingInvite.for_meeting(meeting)

        assert invite.appointment_id == "1001"
        assert invite.patient_id == "55"
        assert invite.join_url == meeting.patient_join_url
        assert invite.subject == "Telehealth Appointment"
        assert invite.body.startswith("Hello Juan Pérez,")
        assert meeting.patient_join_url in invite.body
        assert invite.sms_text == f"Telehealth appointment link: {meeting.patient_join_url}"

    def test_invite_for_unnamed_patient(self):
        invite = MeetingInvite.for_meeting(MeetingBuilder().with_patient_name(" ").build())

        assert invite.patient_name == "Unknown Patient"
