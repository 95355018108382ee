"""Reminder Scheduler for Telehealth Meetings.

APScheduler-based async scheduler that runs SendRemindersUseCase every few
minutes (5 by default). Each run uses its own database session.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore[import-not-found]
from apscheduler.triggers.interval import IntervalTrigger  # type: ignore[import-not-found]
from pytz import timezone

from app.domains.telehealth.application.dto import ReminderRunResult

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from app.domains.telehealth.application.use_cases import SendRemindersUseCase

logger = logging.getLogger(__name__)

JOB_ID = "telehealth_reminders"


class ReminderScheduler:
    """Scheduler de recordatorios de videoconsultas.

    Sends day-before and hour-before reminders to patients. Whether a run
    sends anything is decided by the use case's ReminderPolicy.
    """

    def __init__(
        self,
        session_factory: "async_sessionmaker[AsyncSession]",
        use_case_factory: Callable[["AsyncSession"], "SendRemindersUseCase"],
        interval_minutes: int = 5,
        timezone_name: str = "UTC",
        enabled: bool = True,
    ):
        """Initialize scheduler.

        Args:
            session_factory: Async session factory, one session per run.
            use_case_factory: Builds the use case for a session.
            interval_minutes: Minutes between runs.
            timezone_name: Timezone for the trigger.
            enabled: Whether scheduler is enabled.
        """
        self._session_factory = session_factory
        self._use_case_factory = use_case_factory
        self.interval_minutes = interval_minutes
        self.tz = timezone(timezone_name)
        self.enabled = enabled

        self._scheduler: AsyncIOScheduler | None = None
        self._is_running = False

    async def start(self) -> None:
        """Start the scheduler."""
        if not self.enabled:
            logger.info("ReminderScheduler is disabled, skipping start")
            return

        if self._is_running:
            logger.warning("ReminderScheduler already running")
            return

        scheduler = AsyncIOScheduler(timezone=self.tz)
        self._scheduler = scheduler
        scheduler.add_job(
            self._scheduled_run,
            IntervalTrigger(minutes=self.interval_minutes, timezone=self.tz),
            id=JOB_ID,
            replace_existing=True,
            name="Telehealth Meeting Reminders",
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._is_running = True
        logger.info(f"ReminderScheduler started with timezone {self.tz} (every {self.interval_minutes} min)")

    async def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if self._scheduler and self._is_running:
            self._scheduler.shutdown(wait=False)
            self._is_running = False
            logger.info("ReminderScheduler stopped")

    async def run_once(self, now: datetime | None = None) -> ReminderRunResult:
        """One reminder run in its own session: commit on success, rollback and re-raise on error."""
        async with self._session_factory() as session:
            try:
                result = await self._use_case_factory(session).execute(now or datetime.now(UTC))
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        return result

    async def _scheduled_run(self) -> None:
        # A failed run must not stop the job; the next run retries whatever was not claimed
        try:
            await self.run_once()
        except Exception as e:
            logger.error(f"Error sending telehealth reminders: {e}", exc_info=True)

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._is_running

    def get_jobs_info(self) -> list[dict[str, Any]]:
        """Get information about scheduled jobs."""
        if not self._scheduler:
            return []
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in self._scheduler.get_jobs()
        ]
