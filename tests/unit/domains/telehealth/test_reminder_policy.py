"""
Unit tests for ReminderPolicy (which meetings are due a reminder, and when).
"""

from datetime import UTC, datetime, time, timedelta
from types import SimpleNamespace

import pytest

from app.domains.telehealth.domain.services import ReminderPolicy, start_of_local_day


@pytest.mark.unit
class TestDayBeforeWindow:
    @pytest.fixture
    def policy(self):
        return ReminderPolicy(day_before=True, day_before_at=time(17, 0), run_interval=timedelta(minutes=5))

    @pytest.mark.parametrize(
        "now, due",
        [
            (datetime(2026, 3, 1, 16, 59, 59, tzinfo=UTC), False),
            (datetime(2026, 3, 1, 17, 0, tzinfo=UTC), True),
            (datetime(2026, 3, 1, 17, 4, 59, tzinfo=UTC), True),
            (datetime(2026, 3, 1, 17, 5, tzinfo=UTC), False),
        ],
    )
    def test_due_only_during_one_run(self, policy, now, due):
        assert policy.day_before_due(now) is due

    def test_disabled_is_never_due(self):
        policy = ReminderPolicy(day_before=False)
        assert not policy.day_before_due(datetime(2026, 3, 1, 17, 1, tzinfo=UTC))

    def test_range_is_next_utc_day(self, policy):
        start, end = policy.day_before_range(datetime(2026, 3, 1, 17, 0, tzinfo=UTC))

        assert start == datetime(2026, 3, 2, tzinfo=UTC)
        assert end == datetime(2026, 3, 3, tzinfo=UTC)


@pytest.mark.unit
class TestLocalTimezone:
    @pytest.fixture
    def policy(self):
        return ReminderPolicy(day_before=True, day_before_at=time(17, 0), timezone_name="America/New_York")

    def test_send_time_is_local(self, policy):
        # 17:00 EST is 22:00 UTC
        assert policy.day_before_due(datetime(2026, 1, 15, 22, 2, tzinfo=UTC))
        assert not policy.day_before_due(datetime(2026, 1, 15, 17, 2, tzinfo=UTC))

    def test_range_is_next_local_day(self, policy):
        start, end = policy.day_before_range(datetime(2026, 1, 15, 22, 0, tzinfo=UTC))

        assert start.astimezone(UTC) == datetime(2026, 1, 16, 5, 0, tzinfo=UTC)
        assert end.astimezone(UTC) == datetime(2026, 1, 17, 5, 0, tzinfo=UTC)

    def test_range_across_daylight_saving_change(self, policy):
        # 2026-03-08 has 23 hours in New York
        start, end = policy.day_before_range(datetime(2026, 3, 7, 22, 0, tzinfo=UTC))

        assert end - start == timedelta(hours=23)

    def test_start_of_local_day(self):
        # 02:00 UTC on the 16th is still the 15th in New York
        midnight = start_of_local_day(datetime(2026, 1, 16, 2, 0, tzinfo=UTC), "America/New_York")

        assert midnight.astimezone(UTC) == datetime(2026, 1, 15, 5, 0, tzinfo=UTC)


@pytest.mark.unit
class TestHourBeforeWindow:
    def test_range_is_55_to_65_minutes_ahead(self):
        now = datetime(2026, 3, 1, 14, 0, tzinfo=UTC)

        start, end = ReminderPolicy(hour_before=True).hour_before_range(now)

        assert start == datetime(2026, 3, 1, 14, 55, tzinfo=UTC)
        assert end == datetime(2026, 3, 1, 15, 5, tzinfo=UTC)


@pytest.mark.unit
class TestReminderPolicyFromSettings:
    def test_reads_settings(self):
        settings = SimpleNamespace(
            TELEHEALTH_REMINDER_DAY_BEFORE=True,
            TELEHEALTH_REMINDER_HOUR_BEFORE=False,
            TELEHEALTH_REMINDER_DAY_TIME="18:30",
            TELEHEALTH_TIMEZONE="America/Argentina/Buenos_Aires",
            TELEHEALTH_REMINDER_INTERVAL_MINUTES=10,
        )

        policy = ReminderPolicy.from_settings(settings)

        assert policy.enabled
        assert policy.day_before_at == time(18, 30)
        assert policy.run_interval == timedelta(minutes=10)
        assert policy.timezone_name == "America/Argentina/Buenos_Aires"

    def test_disabled_by_default(self):
        assert not ReminderPolicy().enabled
