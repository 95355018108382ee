"""Formats the encounter note written when a consultation finishes."""

from datetime import UTC, datetime

from ..entities.meeting import MeetingRecord

RULE = "=" * 33
SEPARATOR = "-" * 40
PLATFORM = "Telesalud Videoconsultation"


class ClinicalNoteFormatter:
    """Builds the note text saved to the patient record."""

    def format(
        self,
        meeting: MeetingRecord,
        notes: str | None,
        notes_from_payload: bool,
        completed_at: datetime | None = None,
    ) -> str:
        completed = (completed_at or datetime.now(UTC)).strftime("%Y-%m-%d %H:%M:%S")
        consultation_id = meeting.backend_meeting_id or meeting.appointment_id

        if notes and notes.strip():
            lines = [
                "TELEHEALTH CONSULTATION NOTES",
                RULE,
                "",
                "CLINICAL NOTES:",
                SEPARATOR,
                notes.strip(),
                "",
                SEPARATOR,
                "CONSULTATION DETAILS:",
                f"- Consultation ID: {consultation_id}",
                f"- Completed: {completed}",
                f"- Platform: {PLATFORM}",
                f"- Notes Source: {'Real-time' if notes_from_payload else 'Database'}",
            ]
        else:
            lines = [
                "TELEHEALTH CONSULTATION COMPLETED",
                RULE,
                "",
                "A telehealth consultation was completed via the telesalud platform.",
                "",
                "No clinical notes were captured during this consultation.",
                "Please manually add clinical notes if needed.",
                "",
                "CONSULTATION DETAILS:",
                f"- Consultation ID: {consultation_id}",
                f"- Completed: {completed}",
                f"- Platform: {PLATFORM}",
            ]
        return "\n".join(lines) + "\n"
