"""Background jobs for the telehealth domain."""

from .reminder_scheduler import ReminderScheduler

__all__ = ["ReminderScheduler"]
