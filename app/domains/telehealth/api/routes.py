"""
Telehealth API Routes

FastAPI router for the telehealth bridge: backend webhook, provider
notification polling and meeting management.
"""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse

from app.domains.telehealth.api.dependencies import (
    DbSession,
    get_amend_notes_use_case,
    get_check_backend_use_case,
    get_ensure_meeting_use_case,
    get_ingest_webhook_use_case,
    get_list_backend_meetings_use_case,
    get_list_unread_use_case,
    get_list_upcoming_use_case,
    get_mark_read_use_case,
    get_meeting_use_case,
    get_send_reminders_use_case,
    get_webhook_token,
    is_authorized_webhook,
)
from app.domains.telehealth.api.schemas import (
    AmendNotesBody,
    BackendStatusResponse,
    EnsureMeetingBody,
    EnsureMeetingResponse,
    MarkReadBody,
    MarkReadResponse,
    MeetingDetailResponse,
    MeetingResponse,
    NotificationListResponse,
    ReminderRunResponse,
)
from app.domains.telehealth.application.dto import (
    AmendNotesRequest,
    EnsureMeetingRequest,
    IngestOutcome,
)
from app.domains.telehealth.application.ports import DEFAULT_UNREAD_LIMIT
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
from app.domains.telehealth.domain.exceptions import MeetingRecordNotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telehealth", tags=["Telehealth"])

# Type aliases for use case dependencies
EnsureMeetingUseCaseDep = Annotated[EnsureMeetingUseCase, Depends(get_ensure_meeting_use_case)]
IngestWebhookUseCaseDep = Annotated[IngestWebhookUseCase, Depends(get_ingest_webhook_use_case)]
ListUnreadUseCaseDep = Annotated[ListUnreadNotificationsUseCase, Depends(get_list_unread_use_case)]
MarkReadUseCaseDep = Annotated[MarkNotificationsReadUseCase, Depends(get_mark_read_use_case)]
GetMeetingUseCaseDep = Annotated[GetMeetingUseCase, Depends(get_meeting_use_case)]
AmendNotesUseCaseDep = Annotated[AmendClinicalNotesUseCase, Depends(get_amend_notes_use_case)]
CheckBackendUseCaseDep = Annotated[CheckBackendConnectionUseCase, Depends(get_check_backend_use_case)]
ListBackendMeetingsUseCaseDep = Annotated[ListBackendMeetingsUseCase, Depends(get_list_backend_meetings_use_case)]
ListUpcomingUseCaseDep = Annotated[ListUpcomingMeetingsUseCase, Depends(get_list_upcoming_use_case)]
SendRemindersUseCaseDep = Annotated[SendRemindersUseCase, Depends(get_send_reminders_use_case)]
WebhookTokenDep = Annotated[str | None, Depends(get_webhook_token)]

_OUTCOME_STATUS = {
    IngestOutcome.PROCESSED: status.HTTP_200_OK,
    IngestOutcome.INVALID_PAYLOAD: status.HTTP_400_BAD_REQUEST,
    IngestOutcome.UNKNOWN_MEETING: status.HTTP_404_NOT_FOUND,
}


# =============================================================================
# Webhook
# =============================================================================


@router.post("/webhook")
async def telesalud_webhook(
    request: Request,
    db: DbSession,
    use_case: IngestWebhookUseCaseDep,
    webhook_token: WebhookTokenDep,
):
    """
    Receive meeting lifecycle notifications from the telesalud backend.

    Expected payload:
    {
        "topic": "videoconsultation-finished",
        "vc": {"id": "...", "secret": "...", "evolution": "..."}
    }

    Every outcome is answered with a structured body; the sender retries
    only on 5xx.
    """
    if not is_authorized_webhook(request, webhook_token):
        logger.warning(f"[TELESALUD-WEBHOOK] Rejected unauthorized request from {request.client}")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthorized"})

    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"[TELESALUD-WEBHOOK] Invalid JSON: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "Invalid JSON"},
        )

    try:
        result = await use_case.execute(payload)
    except Exception as e:
        logger.error(f"[TELESALUD-WEBHOOK] Error processing notification: {e}", exc_info=True)
        await db.rollback()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Webhook processing failed"},
        )

    if result.outcome is IngestOutcome.INVALID_PAYLOAD:
        body = {"success": False, "error": result.message}
    elif result.outcome is IngestOutcome.UNKNOWN_MEETING:
        body = {"success": False, "message": result.message}
    else:
        body = result.to_dict()
        logger.info(f"[TELESALUD-WEBHOOK] {result.topic}: {result.message}")

    return JSONResponse(status_code=_OUTCOME_STATUS[result.outcome], content=body)


# =============================================================================
# Notifications
# =============================================================================


@router.get("/notifications", response_model=NotificationListResponse)
async def list_notifications(
    use_case: ListUnreadUseCaseDep,
    provider_id: Annotated[str | None, Query(alias="providerId")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_UNREAD_LIMIT,
):
    """Unread notifications for a provider, newest first."""
    result = await use_case.execute(provider_id=provider_id or None, limit=limit)
    notifications = [event.to_dict() for event in result.data or []]
    return {"success": True, "notifications": notifications, "count": len(notifications)}


@router.post("/notifications", response_model=MarkReadResponse)
async def mark_notifications_read(body: MarkReadBody, use_case: MarkReadUseCaseDep):
    """Mark notifications as read."""
    result = await use_case.execute(body.notification_ids)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": result.error_message},
        )
    return {"success": True, "marked_read": result.data["marked_read"]}


# =============================================================================
# Meetings
# =============================================================================


@router.post("/meetings", response_model=EnsureMeetingResponse)
async def ensure_meeting(body: EnsureMeetingBody, response: Response, use_case: EnsureMeetingUseCaseDep):
    """Create the meeting for an appointment, or return the existing one."""
    result = await use_case.execute(
        EnsureMeetingRequest(
            appointment_id=body.appointment_id,
            provider_name=body.provider_name,
            patient_name=body.patient_name,
            appointment_time=body.appointment_time,
            patient_id=body.patient_id,
            encounter_id=body.encounter_id,
            provider_id=body.provider_id,
            patient_phone=body.patient_phone,
            link_provider=body.link_provider,
            regenerate=body.regenerate,
        )
    )
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return EnsureMeetingResponse(
        created=result.created,
        used_fallback=result.used_fallback,
        fallback_reason=result.fallback_reason,
        meeting=MeetingResponse(**result.meeting.to_dict()),
    )


@router.get("/meetings/upcoming")
async def upcoming_meetings(
    use_case: ListUpcomingUseCaseDep,
    provider_id: Annotated[str | None, Query(alias="providerId")] = None,
) -> dict[str, str]:
    """Backend meeting id -> appointment id for meetings from today on."""
    result = await use_case.execute(provider_id=provider_id or None)
    return result.data


@router.get("/meetings/{appointment_id}", response_model=MeetingDetailResponse)
async def get_meeting(
    appointment_id: str,
    use_case: GetMeetingUseCaseDep,
    include_backend: bool = False,
):
    """Get the meeting of an appointment."""
    result = await use_case.execute(appointment_id, include_backend=include_backend)
    if not result.success:
        raise MeetingRecordNotFound(appointment_id)

    data = result.data
    return MeetingDetailResponse(
        meeting=MeetingResponse(**data["meeting"]),
        can_join=data["can_join"],
        backend=data.get("backend"),
        backend_error=data.get("backend_error"),
    )


@router.put("/meetings/{appointment_id}/notes", response_model=MeetingResponse)
async def amend_notes(appointment_id: str, body: AmendNotesBody, use_case: AmendNotesUseCaseDep):
    """Replace the clinical notes of a meeting."""
    result = await use_case.execute(AmendNotesRequest(appointment_id=appointment_id, notes=body.notes))
    if result.error_code == "MEETING_RECORD_NOT_FOUND":
        raise MeetingRecordNotFound(appointment_id)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error_message)
    return MeetingResponse(**result.data)


@router.get("/backend/status", response_model=BackendStatusResponse)
async def backend_status(use_case: CheckBackendUseCaseDep):
    """Check connectivity with the telesalud backend."""
    result = await use_case.execute()
    return BackendStatusResponse(**result.data)


@router.get("/backend/meetings")
async def backend_meetings(
    request: Request,
    use_case: ListBackendMeetingsUseCaseDep,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """List meetings on the telesalud backend. Other query parameters are sent as filters."""
    filters = {key: value for key, value in request.query_params.items() if key not in ("page", "per_page")}
    result = await use_case.execute(filters, page=page, per_page=per_page)
    return result.data


# =============================================================================
# Reminders
# =============================================================================


@router.post("/reminders/run", response_model=ReminderRunResponse)
async def run_reminders(request: Request, use_case: SendRemindersUseCaseDep, webhook_token: WebhookTokenDep):
    """
    Send the reminders due now.

    For deployments that trigger reminders from an external cron instead of
    the in-process scheduler. Protected by the webhook bearer token.
    """
    if not is_authorized_webhook(request, webhook_token):
        logger.warning(f"[TELEHEALTH-REMINDERS] Rejected unauthorized request from {request.client}")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthorized"})

    result = await use_case.execute()
    return ReminderRunResponse(**result.to_dict())
