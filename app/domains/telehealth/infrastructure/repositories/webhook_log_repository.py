"""Webhook audit log repository."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.telehealth.application.ports import IWebhookAuditLog
from app.domains.telehealth.infrastructure.persistence.sqlalchemy.models import WebhookLogModel

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


class SQLAlchemyWebhookAuditLog(IWebhookAuditLog):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(self, identifier: str, status: str, message: str) -> None:
        self.session.add(
            WebhookLogModel(
                identifier=identifier[:128],
                status=status,
                message=message[:MAX_MESSAGE_LENGTH],
            )
        )
        await self.session.flush()
