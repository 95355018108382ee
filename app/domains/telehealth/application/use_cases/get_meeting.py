# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Read a meeting, optionally with live backend detail.
# ============================================================================
"""Get Meeting Use Case."""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from ...domain.exceptions import TelehealthError
from ..dto import UseCaseResult

if TYPE_CHECKING:
    from ..ports import IMeetingRepository, IRemoteBackendClient

logger = logging.getLogger(__name__)


class GetMeetingUseCase:
    """Returns the stored meeting, whether it can be joined now and backend detail on request."""

    def __init__(
        self,
        meeting_repository: "IMeetingRepository",
        backend_client: "IRemoteBackendClient",
        join_window: timedelta | None = None,
    ) -> None:
        self._meetings = meeting_repository
        self._backend = backend_client
        self._join_window = join_window

    async def execute(self, appointment_id: str, include_backend: bool = False) -> UseCaseResult:
        meeting = await self._meetings.find_by_appointment_id(appointment_id)
        if meeting is None:
            return UseCaseResult.error(
                "MEETING_RECORD_NOT_FOUND",
                f"No telehealth meeting for appointment {appointment_id}",
            )

        data: dict = {
            "meeting": meeting.to_dict(),
            "can_join": meeting.can_join(datetime.now(UTC), self._join_window),
            "backend": None,
        }

        if include_backend and meeting.backend_meeting_id and meeting.medic_secret:
            try:
                data["backend"] = await self._backend.get_meeting(meeting.backend_meeting_id, meeting.medic_secret)
            except TelehealthError as e:
                logger.warning(f"Could not fetch backend detail for {appointment_id}: {e.message}")
                data["backend_error"] = e.to_dict()

        return UseCaseResult.ok(data=data)
