# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Notification store port.
# ============================================================================
"""Notification Store Port."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities import NotificationEvent

DEFAULT_UNREAD_LIMIT = 20


@runtime_checkable
class INotificationRepository(Protocol):
    """Append-only queue of notification events with read tracking."""

    async def append(self, event: "NotificationEvent") -> "NotificationEvent":
        """Unconditional insert. Duplicates are legitimate."""
        ...

    async def list_unread(
        self,
        provider_id: str | None = None,
        limit: int = DEFAULT_UNREAD_LIMIT,
    ) -> list["NotificationEvent"]:
        """Newest first. Broadcast events are visible to every provider."""
        ...

    async def mark_read(self, notification_ids: list[int]) -> int:
        """Idempotent bulk update. Unknown ids are ignored."""
        ...
