"""
Notification Repository Implementation

SQLAlchemy implementation of INotificationRepository (the notification store).
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.telehealth.application.ports import DEFAULT_UNREAD_LIMIT, INotificationRepository
from app.domains.telehealth.domain.entities import NotificationEvent
from app.domains.telehealth.infrastructure.persistence.sqlalchemy.models import NotificationModel

logger = logging.getLogger(__name__)


class SQLAlchemyNotificationRepository(INotificationRepository):
    """Append-only notification queue with read tracking."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, event: NotificationEvent) -> NotificationEvent:
        model = NotificationModel(
            appointment_id=event.appointment_id,
            patient_id=event.patient_id,
            encounter_id=event.encounter_id,
            backend_meeting_id=event.backend_meeting_id,
            meeting_url=event.meeting_url,
            topic=event.topic,
            title=event.title,
            message=event.message,
            patient_display_name=event.patient_display_name,
            is_read=False,
            assigned_provider_id=event.assigned_provider_id,
            created_at=event.created_at,
        )
        self.session.add(model)
        await self.session.flush()
        event.id = model.id
        logger.debug(f"Notification {model.id} ({event.topic.value}) stored for appointment {event.appointment_id}")
        return event

    async def list_unread(
        self,
        provider_id: str | None = None,
        limit: int = DEFAULT_UNREAD_LIMIT,
    ) -> list[NotificationEvent]:
        """
        Unread notifications, newest first.

        With a provider id: that provider's notifications plus broadcasts.
        Without one: every unread notification.
        """
        query = select(NotificationModel).where(NotificationModel.is_read.is_(False))

        if provider_id is not None:
            query = query.where(
                or_(
                    NotificationModel.assigned_provider_id == provider_id,
                    NotificationModel.assigned_provider_id.is_(None),
                )
            )

        query = query.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc()).limit(limit)

        result = await self.session.execute(query)
        models = result.scalars().all()
        return [self._to_entity(m) for m in models]

    async def mark_read(self, notification_ids: list[int]) -> int:
        if not notification_ids:
            return 0
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id.in_(notification_ids),
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True)
        )
        return result.rowcount

    def _to_entity(self, model: NotificationModel) -> NotificationEvent:
        """Convert model to entity."""
        created_at = model.created_at or datetime.now(UTC)
        return NotificationEvent(
            id=model.id,
            appointment_id=model.appointment_id,
            patient_id=model.patient_id,
            encounter_id=model.encounter_id,
            backend_meeting_id=model.backend_meeting_id,
            meeting_url=model.meeting_url,
            topic=model.topic,
            title=model.title,
            message=model.message,
            patient_display_name=model.patient_display_name or "",
            is_read=bool(model.is_read),
            assigned_provider_id=model.assigned_provider_id,
            created_at=created_at,
            updated_at=created_at,
        )
