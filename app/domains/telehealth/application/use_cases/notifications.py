# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Polling read contract of the notification store.
# ============================================================================
"""Notification Use Cases.

List unread notifications for a provider and mark them read.
"""

import logging
from typing import TYPE_CHECKING

from ..dto import UseCaseResult
from ..ports import DEFAULT_UNREAD_LIMIT

if TYPE_CHECKING:
    from ..ports import INotificationRepository

logger = logging.getLogger(__name__)


class ListUnreadNotificationsUseCase:
    """Newest-first unread notifications visible to a provider."""

    def __init__(self, notification_repository: "INotificationRepository") -> None:
        self._notifications = notification_repository

    async def execute(self, provider_id: str | None = None, limit: int = DEFAULT_UNREAD_LIMIT) -> UseCaseResult:
        events = await self._notifications.list_unread(provider_id=provider_id, limit=limit)
        return UseCaseResult.ok(data=events)


class MarkNotificationsReadUseCase:
    """Marks notifications read. Idempotent, unknown ids are ignored."""

    def __init__(self, notification_repository: "INotificationRepository") -> None:
        self._notifications = notification_repository

    async def execute(self, notification_ids: list[int]) -> UseCaseResult:
        if not notification_ids:
            return UseCaseResult.error("NO_NOTIFICATION_IDS", "No notification IDs provided")

        unique_ids = sorted(set(notification_ids))
        marked = await self._notifications.mark_read(unique_ids)
        logger.debug(f"Marked {marked} of {len(unique_ids)} notifications as read")
        return UseCaseResult.ok(data={"marked_read": marked})
