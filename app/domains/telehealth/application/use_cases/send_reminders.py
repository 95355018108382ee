# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Day-before and hour-before patient reminders.
# ============================================================================
"""Send Reminders Use Case.

Runs periodically (every few minutes). Each run picks the meetings the
ReminderPolicy says are due and sends each reminder kind once per meeting.
"""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from ...domain.entities import MeetingRecord
from ...domain.services import MeetingInvite, ReminderPolicy
from ...domain.value_objects import ReminderKind
from ..dto import ReminderRunResult

if TYPE_CHECKING:
    from ..ports import IInviteSender, IMeetingRepository, IReminderLog

logger = logging.getLogger(__name__)


class SendRemindersUseCase:
    """Use case for sending meeting reminders to patients.

    A reminder is claimed in the reminder log before it is sent, so two
    overlapping runs never both send it. A failed delivery is logged and
    not retried.
    """

    def __init__(
        self,
        meeting_repository: "IMeetingRepository",
        reminder_log: "IReminderLog",
        invite_sender: "IInviteSender",
        policy: ReminderPolicy,
    ) -> None:
        self._meetings = meeting_repository
        self._reminders = reminder_log
        self._invites = invite_sender
        self._policy = policy

    async def execute(self, now: datetime | None = None) -> ReminderRunResult:
        """Send every reminder due at ``now``.

        Raises:
            ValueError: If now is naive.
        """
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            raise ValueError("now must be timezone-aware")

        result = ReminderRunResult()
        if not self._policy.enabled:
            logger.debug("Reminders disabled")
            return result

        if self._policy.day_before_due(now):
            start, end = self._policy.day_before_range(now)
            meetings = await self._meetings.list_scheduled_between(start, end)
            await self._remind(ReminderKind.DAY_BEFORE, meetings, result)

        if self._policy.hour_before:
            start, end = self._policy.hour_before_range(now)
            meetings = await self._meetings.list_scheduled_between(start, end)
            await self._remind(ReminderKind.HOUR_BEFORE, meetings, result)

        if result.sent or result.failed:
            logger.info(f"Reminder run: {len(result.sent)} sent, {len(result.failed)} failed")
        return result

    async def _remind(self, kind: ReminderKind, meetings: list[MeetingRecord], result: ReminderRunResult) -> None:
        for meeting in meetings:
            if meeting.id is None or not meeting.patient_join_url:
                result.skipped.append(meeting.appointment_id)
                continue
            if not await self._reminders.claim(meeting.id, meeting.appointment_id, kind):
                result.already_sent += 1
                continue

            try:
                await self._invites.send_invite(MeetingInvite.for_reminder(meeting, kind))
            except Exception as e:
                logger.error(f"Failed to send {kind.value} reminder for appointment {meeting.appointment_id}: {e}")
                result.failed.append(meeting.appointment_id)
                continue

            logger.info(f"Sent {kind.value} reminder for appointment {meeting.appointment_id}")
            result.sent.append((meeting.appointment_id, kind))
