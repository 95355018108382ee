"""Unit tests for the notification polling use cases."""

from datetime import UTC, datetime, timedelta

import pytest

from app.domains.telehealth.application.use_cases import (
    ListUnreadNotificationsUseCase,
    MarkNotificationsReadUseCase,
)
from app.domains.telehealth.domain.entities import NotificationEvent
from app.domains.telehealth.domain.value_objects import NotificationTopic

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


async def seed(repository, *assigned: str | None) -> list[NotificationEvent]:
    events = []
    for offset, provider_id in enumerate(assigned):
        event = NotificationEvent(
            appointment_id=f"10{offset}",
            topic=NotificationTopic.PATIENT_WAITING,
            title="Patient Waiting",
            message="Patient has joined the waiting room.",
            patient_display_name="Juan Pérez",
            assigned_provider_id=provider_id,
            created_at=BASE_TIME + timedelta(minutes=offset),
        )
        events.append(await repository.append(event))
    return events


@pytest.mark.unit
class TestListUnreadNotifications:
    @pytest.mark.asyncio
    async def test_newest_first(self, notification_repository):
        await seed(notification_repository, "9", "9", "9")
        use_case = ListUnreadNotificationsUseCase(notification_repository)

        result = await use_case.execute(provider_id="9")

        assert result.success
        assert [e.id for e in result.data] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_provider_sees_own_and_broadcast(self, notification_repository):
        await seed(notification_repository, "9", "12", None)
        use_case = ListUnreadNotificationsUseCase(notification_repository)

        result = await use_case.execute(provider_id="9")

        assert sorted(e.id for e in result.data) == [1, 3]

    @pytest.mark.asyncio
    async def test_without_filter_sees_everything(self, notification_repository):
        await seed(notification_repository, "9", "12", None)
        use_case = ListUnreadNotificationsUseCase(notification_repository)

        result = await use_case.execute()

        assert len(result.data) == 3

    @pytest.mark.asyncio
    async def test_limit(self, notification_repository):
        await seed(notification_repository, *(["9"] * 5))
        use_case = ListUnreadNotificationsUseCase(notification_repository)

        result = await use_case.execute(provider_id="9", limit=2)

        assert [e.id for e in result.data] == [5, 4]


@pytest.mark.unit
class TestMarkNotificationsRead:
    @pytest.mark.asyncio
    async def test_marked_events_leave_the_unread_list(self, notification_repository):
        await seed(notification_repository, "9", "9")
        mark = MarkNotificationsReadUseCase(notification_repository)
        listing = ListUnreadNotificationsUseCase(notification_repository)

        result = await mark.execute([1])

        assert result.data == {"marked_read": 1}
        unread = await listing.execute(provider_id="9")
        assert [e.id for e in unread.data] == [2]

    @pytest.mark.asyncio
    async def test_idempotent_and_ignores_unknown_ids(self, notification_repository):
        await seed(notification_repository, "9")
        use_case = MarkNotificationsReadUseCase(notification_repository)

        first = await use_case.execute([1, 1, 99])
        second = await use_case.execute([1])

        assert first.data == {"marked_read": 1}
        assert second.data == {"marked_read": 0}

    @pytest.mark.asyncio
    async def test_empty_list_is_an_error(self, notification_repository):
        result = await MarkNotificationsReadUseCase(notification_repository).execute([])

        assert not result.success
        assert result.error_code == "NO_NOTIFICATION_IDS"
