# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Port for the sent-reminder ledger.
# ============================================================================
"""Reminder Log Port."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.value_objects import ReminderKind


@runtime_checkable
class IReminderLog(Protocol):
    """Remembers which reminders went out so each is sent once."""

    async def claim(self, meeting_id: int, appointment_id: str, kind: "ReminderKind") -> bool:
        """Record the reminder. False if it was already recorded, by this run or another."""
        ...
