# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Lifecycle webhook ingestion (status machine + side effects).
# ============================================================================
"""Ingest Webhook Use Case.

Turns a loosely structured backend payload into a status transition, an
encounter note on finish and one notification per resolved webhook.
"""

import logging
from typing import TYPE_CHECKING, Any

from ...domain.entities import MeetingRecord, NotificationEvent
from ...domain.exceptions import InvalidPayload, UnknownMeeting
from ...domain.services import ClinicalNoteFormatter
from ...domain.value_objects import MeetingStatus, WebhookTopic
from ..dto import IngestOutcome, IngestResult
from ..ports import HostAppointmentStatus

if TYPE_CHECKING:
    from ..ports import (
        IAppointmentStatusGateway,
        IEncounterNoteWriter,
        IMeetingRepository,
        INotificationRepository,
        IWebhookAuditLog,
    )

logger = logging.getLogger(__name__)

UNKNOWN_IDENTIFIER = "unknown"


class IngestWebhookUseCase:
    """Use case for processing telesalud lifecycle webhooks.

    execute() never raises for bad input: invalid payloads and unresolvable
    meetings come back as classified results so the sender gets a
    deterministic answer.
    """

    def __init__(
        self,
        meeting_repository: "IMeetingRepository",
        notification_repository: "INotificationRepository",
        note_writer: "IEncounterNoteWriter",
        appointment_gateway: "IAppointmentStatusGateway",
        audit_log: "IWebhookAuditLog",
        note_formatter: ClinicalNoteFormatter | None = None,
    ) -> None:
        self._meetings = meeting_repository
        self._notifications = notification_repository
        self._notes = note_writer
        self._appointments = appointment_gateway
        self._audit = audit_log
        self._formatter = note_formatter or ClinicalNoteFormatter()

    async def execute(self, payload: Any) -> IngestResult:
        """Execute the ingestion.

        Args:
            payload: Decoded JSON body, expected {topic, vc: {id|secret, evolution?}}

        Returns:
            IngestResult classified as processed, invalid_payload or unknown_meeting
        """
        try:
            topic_value, identifier, evolution = self._parse(payload)
        except InvalidPayload as e:
            logger.warning(f"[TELEHEALTH-WEBHOOK] Invalid payload: {e.message}")
            await self._audit.record(UNKNOWN_IDENTIFIER, "error", e.message)
            return IngestResult.invalid_payload(e.message)

        logger.info(f"[TELEHEALTH-WEBHOOK] topic={topic_value} identifier={identifier}")
        await self._audit.record(identifier, "received", f"Processing notification: {topic_value}")

        try:
            meeting = await self._resolve(identifier)
        except UnknownMeeting as e:
            logger.warning(f"[TELEHEALTH-WEBHOOK] {e.message}")
            await self._audit.record(identifier, "error", e.message)
            return IngestResult.unknown_meeting(e.message, topic_value, identifier)

        topic = WebhookTopic.parse(topic_value)
        status_changed = False
        note_created = False

        if topic is WebhookTopic.VIDEOCONSULTATION_FINISHED:
            status_changed, note_created = await self._finish(meeting, evolution)
        elif topic is not None and topic.target_status is not None:
            status_changed = await self._advance(meeting, topic.target_status)
            if status_changed and topic is WebhookTopic.VIDEOCONSULTATION_STARTED:
                await self._appointments.update_status(meeting.appointment_id, HostAppointmentStatus.IN_PROGRESS)
        elif topic is None:
            logger.info(f"[TELEHEALTH-WEBHOOK] Unrecognized topic '{topic_value}', no state change")

        notification = await self._notifications.append(NotificationEvent.for_meeting(meeting, topic, topic_value))

        message = f"Processed {topic_value} for appointment {meeting.appointment_id}"
        if not status_changed:
            message += " (status unchanged)"
        await self._audit.record(identifier, "processed", message)

        return IngestResult(
            outcome=IngestOutcome.PROCESSED,
            message=message,
            topic=topic_value,
            identifier=identifier,
            meeting_id=meeting.id,
            status=meeting.status,
            status_changed=status_changed,
            note_created=note_created,
            notification=notification,
        )

    @staticmethod
    def _parse(payload: Any) -> tuple[str, str, str | None]:
        if not isinstance(payload, dict):
            raise InvalidPayload("Payload must be a JSON object")

        topic = payload.get("topic")
        if not isinstance(topic, str) or not topic.strip():
            raise InvalidPayload("Missing topic")

        vc = payload.get("vc")
        if not isinstance(vc, dict):
            raise InvalidPayload("Missing vc data")

        # A numeric id of 0 is still an id
        candidates = (vc.get("id"), vc.get("secret"))
        identifier = next(
            (str(value).strip() for value in candidates if value is not None and str(value).strip()),
            None,
        )
        if identifier is None:
            raise InvalidPayload("Missing vc.id or vc.secret")

        evolution = vc.get("evolution")
        if evolution is not None and not isinstance(evolution, str):
            evolution = str(evolution)

        return topic.strip(), identifier, evolution

    async def _resolve(self, identifier: str) -> MeetingRecord:
        meeting = await self._meetings.find_by_identifier(identifier)
        if meeting is None or meeting.id is None:
            raise UnknownMeeting(identifier)
        return meeting

    async def _advance(self, meeting: MeetingRecord, target: MeetingStatus) -> bool:
        changed = await self._meetings.advance_status(meeting.id, target, target.predecessors())
        if changed:
            # The row only moves forward, so the snapshot can always follow it
            meeting.advance_to(target)
            logger.info(f"Meeting {meeting.appointment_id} moved to {target.value}")
        return changed

    async def _finish(self, meeting: MeetingRecord, evolution: str | None) -> tuple[bool, bool]:
        payload_notes = (evolution or "").strip()
        notes = payload_notes or (meeting.clinical_notes or "").strip()

        finished_now = await self._meetings.mark_finished(meeting.id, payload_notes or None)
        if not finished_now:
            logger.info(f"Meeting {meeting.appointment_id} already finished, skipping encounter note")
            return False, False

        meeting.finish(payload_notes)

        note_text = self._formatter.format(meeting, notes, notes_from_payload=bool(payload_notes))
        await self._notes.create_note(meeting, note_text)
        await self._appointments.update_status(meeting.appointment_id, HostAppointmentStatus.COMPLETED)

        summary = f"{len(notes)} chars" if notes else "none captured"
        logger.info(f"Meeting {meeting.appointment_id} finished, clinical notes: {summary}")
        return True, True
