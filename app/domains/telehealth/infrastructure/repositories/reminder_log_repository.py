"""Sent-reminder ledger repository."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.telehealth.application.ports import IReminderLog
from app.domains.telehealth.domain.value_objects import ReminderKind
from app.domains.telehealth.infrastructure.persistence.sqlalchemy.models import ReminderModel

logger = logging.getLogger(__name__)


class SQLAlchemyReminderLog(IReminderLog):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def claim(self, meeting_id: int, appointment_id: str, kind: ReminderKind) -> bool:
        """Insert inside a SAVEPOINT; a unique violation means the reminder was already sent."""
        try:
            async with self.session.begin_nested():
                self.session.add(ReminderModel(meeting_id=meeting_id, appointment_id=appointment_id, kind=kind))
                await self.session.flush()
        except IntegrityError:
            logger.debug(f"{kind.value} reminder for appointment {appointment_id} already recorded")
            return False
        return True
