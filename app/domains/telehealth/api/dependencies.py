"""
Telehealth API Dependencies

FastAPI dependencies for the telehealth domain.
"""

import hmac
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.container import get_container
from app.database.async_db import get_async_db
from app.domains.telehealth.application.use_cases import (
    AmendClinicalNotesUseCase,
    CheckBackendConnectionUseCase,
    EnsureMeetingUseCase,
    GetMeetingUseCase,
    IngestWebhookUseCase,
    ListBackendMeetingsUseCase,
    ListUnreadNotificationsUseCase,
    ListUpcomingMeetingsUseCase,
    MarkNotificationsReadUseCase,
    SendRemindersUseCase,
)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_async_db)]


def get_ensure_meeting_use_case(db: DbSession) -> EnsureMeetingUseCase:
    """Get EnsureMeetingUseCase instance with database session."""
    return get_container().telehealth.create_ensure_meeting_use_case(db)


def get_ingest_webhook_use_case(db: DbSession) -> IngestWebhookUseCase:
    """Get IngestWebhookUseCase instance with database session."""
    return get_container().telehealth.create_ingest_webhook_use_case(db)


def get_list_unread_use_case(db: DbSession) -> ListUnreadNotificationsUseCase:
    return get_container().telehealth.create_list_unread_notifications_use_case(db)


def get_mark_read_use_case(db: DbSession) -> MarkNotificationsReadUseCase:
    return get_container().telehealth.create_mark_notifications_read_use_case(db)


def get_meeting_use_case(db: DbSession) -> GetMeetingUseCase:
    return get_container().telehealth.create_get_meeting_use_case(db)


def get_amend_notes_use_case(db: DbSession) -> AmendClinicalNotesUseCase:
    return get_container().telehealth.create_amend_notes_use_case(db)


def get_check_backend_use_case() -> CheckBackendConnectionUseCase:
    return get_container().telehealth.create_check_backend_use_case()


def get_list_backend_meetings_use_case() -> ListBackendMeetingsUseCase:
    return get_container().telehealth.create_list_backend_meetings_use_case()


def get_list_upcoming_use_case(db: DbSession) -> ListUpcomingMeetingsUseCase:
    return get_container().telehealth.create_list_upcoming_meetings_use_case(db)


def get_send_reminders_use_case(db: DbSession) -> SendRemindersUseCase:
    return get_container().telehealth.create_send_reminders_use_case(db)


def get_webhook_token() -> str | None:
    """Configured bearer token for the inbound webhook (None disables the check)."""
    return get_container().settings.TELESALUD_WEBHOOK_TOKEN


def is_authorized_webhook(request: Request, expected_token: str | None) -> bool:
    """Constant-time bearer token comparison."""
    if not expected_token:
        return True
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False
    return hmac.compare_digest(token.strip().encode(), expected_token.encode())


__all__ = [
    "DbSession",
    "get_amend_notes_use_case",
    "get_check_backend_use_case",
    "get_ensure_meeting_use_case",
    "get_ingest_webhook_use_case",
    "get_list_backend_meetings_use_case",
    "get_list_unread_use_case",
    "get_list_upcoming_use_case",
    "get_mark_read_use_case",
    "get_meeting_use_case",
    "get_send_reminders_use_case",
    "get_webhook_token",
    "is_authorized_webhook",
]
