"""
Reminder Policy - Domain Service.

Decides which meetings are due a reminder at a given instant. The clinic's
local timezone drives "tomorrow" and the day-before send time; everything
is compared as timezone-aware datetimes.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any

import pytz

DEFAULT_TIMEZONE = "UTC"


def start_of_local_day(now: datetime, timezone_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Midnight of now's calendar day in the given timezone."""
    tz = pytz.timezone(timezone_name)
    return tz.localize(datetime.combine(now.astimezone(tz).date(), time.min))


@dataclass(frozen=True)
class ReminderPolicy:
    """
    When reminders go out.

    Day-before reminders are sent during the run that falls in
    [day_before_at, day_before_at + run_interval) local time and cover every
    meeting of the next local day. Hour-before reminders cover meetings
    starting 55 to 65 minutes after the run.
    """

    day_before: bool = False
    hour_before: bool = False
    day_before_at: time = time(17, 0)
    timezone_name: str = DEFAULT_TIMEZONE
    run_interval: timedelta = timedelta(minutes=5)
    hour_before_from: timedelta = timedelta(minutes=55)
    hour_before_to: timedelta = timedelta(minutes=65)

    @classmethod
    def from_settings(cls, settings: Any) -> "ReminderPolicy":
        return cls(
            day_before=settings.TELEHEALTH_REMINDER_DAY_BEFORE,
            hour_before=settings.TELEHEALTH_REMINDER_HOUR_BEFORE,
            day_before_at=time.fromisoformat(settings.TELEHEALTH_REMINDER_DAY_TIME),
            timezone_name=settings.TELEHEALTH_TIMEZONE,
            run_interval=timedelta(minutes=settings.TELEHEALTH_REMINDER_INTERVAL_MINUTES),
        )

    @property
    def enabled(self) -> bool:
        return self.day_before or self.hour_before

    def _local_midnight(self, day: date) -> datetime:
        return pytz.timezone(self.timezone_name).localize(datetime.combine(day, time.min))

    def day_before_due(self, now: datetime) -> bool:
        if not self.day_before:
            return False
        tz = pytz.timezone(self.timezone_name)
        local_now = now.astimezone(tz)
        send_at = tz.localize(datetime.combine(local_now.date(), self.day_before_at))
        return send_at <= local_now < send_at + self.run_interval

    def day_before_range(self, now: datetime) -> tuple[datetime, datetime]:
        """The whole next local day, as [start, end)."""
        tomorrow = start_of_local_day(now, self.timezone_name).date() + timedelta(days=1)
        return self._local_midnight(tomorrow), self._local_midnight(tomorrow + timedelta(days=1))

    def hour_before_range(self, now: datetime) -> tuple[datetime, datetime]:
        return now + self.hour_before_from, now + self.hour_before_to
