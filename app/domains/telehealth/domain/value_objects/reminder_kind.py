"""Reminder Kind Value Object."""

from enum import Enum


class ReminderKind(str, Enum):
    """Patient reminders sent ahead of a meeting, each at most once."""

    DAY_BEFORE = "day"
    HOUR_BEFORE = "hour"

    @property
    def lead_text(self) -> str:
        """How far ahead the appointment is, as the reminder phrases it."""
        return "tomorrow" if self is ReminderKind.DAY_BEFORE else "in about one hour"
