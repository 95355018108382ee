# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Persistence port for meeting records.
# ============================================================================
"""Meeting Repository Port."""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities import MeetingRecord
    from ...domain.value_objects import MeetingStatus


@runtime_checkable
class IMeetingRepository(Protocol):
    """Interface for meeting persistence.

    The store enforces one meeting per appointment and performs status
    changes as single conditional updates.
    """

    async def find_by_appointment_id(self, appointment_id: str) -> "MeetingRecord | None":
        ...

    async def find_by_identifier(self, identifier: str) -> "MeetingRecord | None":
        """Resolve a webhook identifier (backend id or one of the secrets)."""
        ...

    async def insert_or_get(self, meeting: "MeetingRecord") -> tuple["MeetingRecord", bool]:
        """Insert the meeting, or return the one that already exists.

        Returns:
            (stored meeting, True if this call inserted it)
        """
        ...

    async def update_links(self, meeting: "MeetingRecord") -> bool:
        """Persist regenerated links of an unfinished meeting. False if it finished meanwhile."""
        ...

    async def advance_status(
        self,
        meeting_id: int,
        new_status: "MeetingStatus",
        allowed_from: list["MeetingStatus"],
    ) -> bool:
        """Conditional status update. True if a row changed."""
        ...

    async def mark_finished(self, meeting_id: int, notes: str | None = None) -> bool:
        """Atomically finish a meeting that is not finished yet.

        Notes are stored only when non-empty. True if this call finished it.
        """
        ...

    async def update_notes(self, meeting_id: int, notes: str) -> None:
        ...

    async def list_scheduled_between(self, start: datetime, end: datetime) -> list["MeetingRecord"]:
        """Unfinished meetings with start <= appointment_time < end, earliest first."""
        ...

    async def list_upcoming_with_backend(
        self,
        since: datetime,
        provider_id: str | None = None,
    ) -> list["MeetingRecord"]:
        """Backend-issued meetings at or after since, optionally for one provider."""
        ...
