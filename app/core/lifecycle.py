"""
Application lifecycle management using the FastAPI lifespan pattern.

Startup logs the operating mode (telesalud backend or standalone links) and
starts the reminder scheduler when reminders are on; shutdown stops it,
closes the backend HTTP client and disposes the database engine.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import Settings, get_settings
from app.core.container import get_container
from app.database.async_db import AsyncSessionLocal, close_async_engine
from app.domains.telehealth.infrastructure.scheduler import ReminderScheduler

logger = logging.getLogger(__name__)


class LifecycleManager:
    """Handles startup checks and graceful shutdown."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._initialized = False
        self._reminder_scheduler: ReminderScheduler | None = None

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")
        self._verify_configurations()
        await self._start_reminders()
        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")
        if self._reminder_scheduler is not None:
            await self._reminder_scheduler.stop()
            self._reminder_scheduler = None
        await get_container().close()
        await close_async_engine()
        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    async def _start_reminders(self) -> None:
        settings = self._settings
        if not (settings.TELEHEALTH_REMINDER_DAY_BEFORE or settings.TELEHEALTH_REMINDER_HOUR_BEFORE):
            logger.info("Telehealth reminders disabled")
            return
        self._reminder_scheduler = get_container().telehealth.create_reminder_scheduler(AsyncSessionLocal)
        await self._reminder_scheduler.start()

    def _verify_configurations(self) -> None:
        """Log the telehealth operating mode and configuration gaps."""
        settings = self._settings
        if settings.telesalud_enabled:
            logger.info(f"Telesalud backend enabled: {settings.TELESALUD_API_URL}")
            if not settings.TELESALUD_NOTIFICATION_URL:
                logger.warning("TELESALUD_NOTIFICATION_URL not configured - backend webhooks will not reach us")
            if settings.TELESALUD_INTERNAL_HOST and not (
                settings.TELESALUD_PUBLIC_HTTPS_URL or settings.TELESALUD_PUBLIC_HTTP_URL
            ):
                logger.error("TELESALUD_INTERNAL_HOST set without a public URL - backend requests will be refused")
        else:
            logger.info(f"Telesalud backend not configured - standalone mode with {settings.TELEHEALTH_PROVIDER} links")

        if not settings.TELESALUD_WEBHOOK_TOKEN:
            logger.warning("TELESALUD_WEBHOOK_TOKEN not configured - webhook accepts unauthenticated requests")

        if settings.TELEHEALTH_PROVIDER == "doxy_me" and not settings.DOXY_ROOM_URL:
            logger.warning("DOXY_ROOM_URL not configured - doxy_me links cannot be generated")
        if settings.TELEHEALTH_PROVIDER == "doximity" and not settings.DOXIMITY_ROOM_URL:
            logger.warning("DOXIMITY_ROOM_URL not configured - doximity links cannot be generated")


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()
    await lifecycle.startup()

    yield

    await lifecycle.shutdown()
