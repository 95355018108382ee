"""Invite content for a newly scheduled meeting, and its reminders."""

from dataclasses import dataclass

from ..entities.meeting import MeetingRecord
from ..value_objects.reminder_kind import ReminderKind


@dataclass(frozen=True)
class MeetingInvite:
    """What the patient receives. Delivery is up to the invite sender."""

    appointment_id: str
    patient_id: str | None
    patient_name: str
    join_url: str
    subject: str
    body: str
    sms_text: str

    @classmethod
    def for_meeting(cls, meeting: MeetingRecord) -> "MeetingInvite":
        join_url = meeting.patient_join_url or ""
        name = meeting.patient_display_name
        body = (
            f"Hello {name},\n\n"
            "Your telehealth appointment is scheduled. Please join using the link below:\n"
            f"{join_url}\n\n"
            "Thank you."
        )
        return cls(
            appointment_id=meeting.appointment_id,
            patient_id=meeting.patient_id,
            patient_name=name,
            join_url=join_url,
            subject="Telehealth Appointment",
            body=body,
            sms_text=f"Telehealth appointment link: {join_url}",
        )

    @classmethod
    def for_reminder(cls, meeting: MeetingRecord, kind: ReminderKind) -> "MeetingInvite":
        """Same link as the original invite, worded as a reminder."""
        join_url = meeting.patient_join_url or ""
        name = meeting.patient_display_name
        body = (
            f"Hello {name},\n\n"
            f"This is a reminder that your telehealth appointment is {kind.lead_text}. "
            "Please join using the link below:\n"
            f"{join_url}\n\n"
            "Thank you."
        )
        return cls(
            appointment_id=meeting.appointment_id,
            patient_id=meeting.patient_id,
            patient_name=name,
            join_url=join_url,
            subject="Telehealth Appointment Reminder",
            body=body,
            sms_text=f"Reminder: telehealth appointment {kind.lead_text}. Link: {join_url}",
        )
