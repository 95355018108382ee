"""Default encounter note writer: stores the note in telehealth_encounter_notes."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.telehealth.application.ports import IEncounterNoteWriter
from app.domains.telehealth.domain.entities import MeetingRecord
from app.domains.telehealth.infrastructure.persistence.sqlalchemy.models import EncounterNoteModel

logger = logging.getLogger(__name__)


class SQLAlchemyEncounterNoteWriter(IEncounterNoteWriter):
    """One note per meeting, enforced by the unique meeting_id column."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, meeting: MeetingRecord, note_text: str) -> int | None:
        model = EncounterNoteModel(
            meeting_id=meeting.id,
            appointment_id=meeting.appointment_id,
            patient_id=meeting.patient_id,
            encounter_id=meeting.encounter_id,
            backend_meeting_id=meeting.backend_meeting_id,
            note_text=note_text,
        )
        self.session.add(model)
        await self.session.flush()
        logger.info(f"Encounter note {model.id} created for appointment {meeting.appointment_id}")
        return model.id
