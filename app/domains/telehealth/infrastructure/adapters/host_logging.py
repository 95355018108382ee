"""
Logging adapters for host collaborators.

Used when the bridge runs without a host integration for appointment status
updates or invite delivery. They record what would have been sent.
"""

import logging

from app.domains.telehealth.application.ports import (
    HostAppointmentStatus,
    IAppointmentStatusGateway,
    IInviteSender,
)
from app.domains.telehealth.domain.services import MeetingInvite

logger = logging.getLogger(__name__)


class LoggingAppointmentStatusGateway(IAppointmentStatusGateway):
    async def update_status(self, appointment_id: str, status: HostAppointmentStatus) -> None:
        logger.info(f"[HOST] Appointment {appointment_id} status -> {status.value}")


class LoggingInviteSender(IInviteSender):
    def __init__(self, sms_enabled: bool = False):
        self._sms_enabled = sms_enabled

    async def send_invite(self, invite: MeetingInvite) -> None:
        if not invite.join_url:
            logger.warning(f"[HOST] No join URL for appointment {invite.appointment_id}, invite skipped")
            return
        logger.info(f"[HOST] Email invite '{invite.subject}' for patient {invite.patient_id} ({invite.patient_name})")
        if self._sms_enabled:
            logger.info(f"[HOST] SMS invite for patient {invite.patient_id}: {invite.sms_text}")
