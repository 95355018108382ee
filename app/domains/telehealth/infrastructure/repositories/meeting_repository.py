"""
Meeting Repository Implementation

SQLAlchemy implementation of IMeetingRepository. Uniqueness of
appointment_id and conditional updates carry the concurrency guarantees.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.telehealth.application.ports import IMeetingRepository
from app.domains.telehealth.domain.entities import MeetingRecord
from app.domains.telehealth.domain.value_objects import MeetingStatus
from app.domains.telehealth.infrastructure.persistence.sqlalchemy.models import MeetingModel

logger = logging.getLogger(__name__)


class SQLAlchemyMeetingRepository(IMeetingRepository):
    """
    SQLAlchemy implementation of meeting repository.

    Handles all meeting persistence operations.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_appointment_id(self, appointment_id: str) -> MeetingRecord | None:
        result = await self.session.execute(
            select(MeetingModel).where(MeetingModel.appointment_id == appointment_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_identifier(self, identifier: str) -> MeetingRecord | None:
        """Match the backend id first, then either secret."""
        result = await self.session.execute(
            select(MeetingModel)
            .where(
                or_(
                    MeetingModel.backend_meeting_id == identifier,
                    MeetingModel.medic_secret == identifier,
                    MeetingModel.patient_secret == identifier,
                )
            )
            .order_by(MeetingModel.id)
            .limit(1)
        )
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def insert_or_get(self, meeting: MeetingRecord) -> tuple[MeetingRecord, bool]:
        """Insert inside a SAVEPOINT; on a unique violation return the existing row."""
        model = self._to_model(meeting)
        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError:
            logger.info(f"Meeting for appointment {meeting.appointment_id} already exists, fetching it")
            existing = await self.find_by_appointment_id(meeting.appointment_id)
            if existing is None:
                raise
            return existing, False

        return self._to_entity(model), True

    async def update_links(self, meeting: MeetingRecord) -> bool:
        result = await self.session.execute(
            update(MeetingModel)
            .where(
                MeetingModel.id == meeting.id,
                MeetingModel.status != MeetingStatus.FINISHED,
            )
            .values(
                link_provider=meeting.link_provider,
                backend_meeting_id=meeting.backend_meeting_id,
                medic_secret=meeting.medic_secret,
                patient_secret=meeting.patient_secret,
                provider_join_url=meeting.provider_join_url,
                patient_join_url=meeting.patient_join_url,
                data_url=meeting.data_url,
                valid_from=meeting.valid_from,
                valid_to=meeting.valid_to,
                updated_at=datetime.now(UTC),
            )
        )
        return result.rowcount > 0

    async def advance_status(
        self,
        meeting_id: int,
        new_status: MeetingStatus,
        allowed_from: list[MeetingStatus],
    ) -> bool:
        if not allowed_from:
            return False
        result = await self.session.execute(
            update(MeetingModel)
            .where(
                MeetingModel.id == meeting_id,
                MeetingModel.status.in_(allowed_from),
            )
            .values(status=new_status, updated_at=datetime.now(UTC))
        )
        return result.rowcount > 0

    async def mark_finished(self, meeting_id: int, notes: str | None = None) -> bool:
        now = datetime.now(UTC)
        values = {"status": MeetingStatus.FINISHED, "finished_at": now, "updated_at": now}
        if notes and notes.strip():
            values["clinical_notes"] = notes.strip()

        result = await self.session.execute(
            update(MeetingModel)
            .where(
                MeetingModel.id == meeting_id,
                MeetingModel.status != MeetingStatus.FINISHED,
            )
            .values(**values)
        )
        return result.rowcount > 0

    async def update_notes(self, meeting_id: int, notes: str) -> None:
        await self.session.execute(
            update(MeetingModel)
            .where(MeetingModel.id == meeting_id)
            .values(clinical_notes=notes, updated_at=datetime.now(UTC))
        )

    async def list_scheduled_between(self, start: datetime, end: datetime) -> list[MeetingRecord]:
        result = await self.session.execute(
            select(MeetingModel)
            .where(
                MeetingModel.status != MeetingStatus.FINISHED,
                MeetingModel.appointment_time >= start,
                MeetingModel.appointment_time < end,
            )
            .order_by(MeetingModel.appointment_time, MeetingModel.id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_upcoming_with_backend(
        self,
        since: datetime,
        provider_id: str | None = None,
    ) -> list[MeetingRecord]:
        query = select(MeetingModel).where(
            MeetingModel.backend_meeting_id.is_not(None),
            MeetingModel.appointment_time >= since,
        )
        if provider_id:
            query = query.where(MeetingModel.provider_id == provider_id)
        result = await self.session.execute(query.order_by(MeetingModel.appointment_time, MeetingModel.id))
        return [self._to_entity(model) for model in result.scalars().all()]

    def _to_model(self, meeting: MeetingRecord) -> MeetingModel:
        return MeetingModel(
            appointment_id=meeting.appointment_id,
            patient_id=meeting.patient_id,
            encounter_id=meeting.encounter_id,
            provider_id=meeting.provider_id,
            provider_name=meeting.provider_name,
            patient_name=meeting.patient_name,
            appointment_time=meeting.appointment_time,
            link_provider=meeting.link_provider,
            backend_meeting_id=meeting.backend_meeting_id,
            medic_secret=meeting.medic_secret,
            patient_secret=meeting.patient_secret,
            provider_join_url=meeting.provider_join_url,
            patient_join_url=meeting.patient_join_url,
            data_url=meeting.data_url,
            valid_from=meeting.valid_from,
            valid_to=meeting.valid_to,
            status=meeting.status,
            clinical_notes=meeting.clinical_notes,
            finished_at=meeting.finished_at,
            created_at=meeting.created_at,
            updated_at=meeting.updated_at,
        )

    def _to_entity(self, model: MeetingModel) -> MeetingRecord:
        """Convert model to entity."""
        return MeetingRecord(
            id=model.id,
            appointment_id=model.appointment_id,
            patient_id=model.patient_id,
            encounter_id=model.encounter_id,
            provider_id=model.provider_id,
            provider_name=model.provider_name or "",
            patient_name=model.patient_name or "",
            appointment_time=model.appointment_time,
            link_provider=model.link_provider,
            backend_meeting_id=model.backend_meeting_id,
            medic_secret=model.medic_secret,
            patient_secret=model.patient_secret,
            provider_join_url=model.provider_join_url,
            patient_join_url=model.patient_join_url,
            data_url=model.data_url,
            valid_from=model.valid_from,
            valid_to=model.valid_to,
            status=model.status or MeetingStatus.SCHEDULED,
            clinical_notes=model.clinical_notes,
            finished_at=model.finished_at,
            created_at=model.created_at or datetime.now(UTC),
            updated_at=model.updated_at or datetime.now(UTC),
        )
