# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Clinical notes amendment (allowed after finish).
# ============================================================================
"""Amend Clinical Notes Use Case."""

import logging
from typing import TYPE_CHECKING

from ..dto import AmendNotesRequest, UseCaseResult

if TYPE_CHECKING:
    from ..ports import IMeetingRepository

logger = logging.getLogger(__name__)


class AmendClinicalNotesUseCase:
    """Replaces the clinical notes of a meeting, finished or not."""

    def __init__(self, meeting_repository: "IMeetingRepository") -> None:
        self._meetings = meeting_repository

    async def execute(self, request: AmendNotesRequest) -> UseCaseResult:
        meeting = await self._meetings.find_by_appointment_id(request.appointment_id)
        if meeting is None:
            return UseCaseResult.error(
                "MEETING_RECORD_NOT_FOUND",
                f"No telehealth meeting for appointment {request.appointment_id}",
            )

        try:
            meeting.amend_notes(request.notes)
        except ValueError as e:
            return UseCaseResult.error("VALIDATION_ERROR", str(e))

        await self._meetings.update_notes(meeting.id, meeting.clinical_notes or "")
        logger.info(f"Clinical notes amended for appointment {request.appointment_id}")
        return UseCaseResult.ok(data=meeting.to_dict())
