"""Upcoming backend meetings, keyed by backend id."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from ...domain.services import start_of_local_day
from ..dto import UseCaseResult

if TYPE_CHECKING:
    from ..ports import IMeetingRepository


class ListUpcomingMeetingsUseCase:
    """
    Maps backend meeting ids to appointment ids for meetings from today on.

    Provider screens use it to match backend notifications to the
    appointments on their calendar.
    """

    def __init__(self, meeting_repository: "IMeetingRepository", timezone_name: str = "UTC") -> None:
        self._meetings = meeting_repository
        self._timezone_name = timezone_name

    async def execute(self, provider_id: str | None = None, now: datetime | None = None) -> UseCaseResult:
        since = start_of_local_day(now or datetime.now(UTC), self._timezone_name)
        meetings = await self._meetings.list_upcoming_with_backend(since, provider_id=provider_id)
        mapping = {m.backend_meeting_id: m.appointment_id for m in meetings if m.backend_meeting_id}
        return UseCaseResult.ok(data=mapping)
