# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Idempotent "ensure a meeting exists" for an appointment.
# ============================================================================
"""Ensure Meeting Use Case.

Chooses between the telesalud backend and the local link provider, persists
the meeting exactly once and triggers the patient invite.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...domain.entities import MeetingRecord
from ...domain.exceptions import BackendError, BackendRejected, ConfigurationMissing, MalformedResponse
from ...domain.services import MeetingInvite
from ...domain.value_objects import LinkProvider
from ..dto import EnsureMeetingRequest, EnsureMeetingResult

if TYPE_CHECKING:
    from ...domain.services import MeetingLinkProvider
    from ..ports import IInviteSender, IMeetingRepository, IRemoteBackendClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _GeneratedLinks:
    link_provider: LinkProvider
    provider_join_url: str
    patient_join_url: str
    backend_meeting_id: str | None = None
    medic_secret: str | None = None
    patient_secret: str | None = None
    data_url: str | None = None
    valid_from: str | None = None
    valid_to: str | None = None
    fallback_reason: str | None = None


class EnsureMeetingUseCase:
    """Use case that guarantees a clinician always gets a usable link.

    Backend failures degrade to the local provider. Only a missing local
    provider setting or a persistence error reaches the caller.
    """

    def __init__(
        self,
        meeting_repository: "IMeetingRepository",
        backend_client: "IRemoteBackendClient",
        link_provider: "MeetingLinkProvider",
        invite_sender: "IInviteSender",
    ) -> None:
        self._meetings = meeting_repository
        self._backend = backend_client
        self._links = link_provider
        self._invites = invite_sender

    async def execute(self, request: EnsureMeetingRequest) -> EnsureMeetingResult:
        """Execute the ensure meeting use case.

        Args:
            request: Appointment identity, participants and time.

        Returns:
            EnsureMeetingResult with the stored meeting.

        Raises:
            ConfigurationMissing: The local provider is not configured.
        """
        existing = await self._meetings.find_by_appointment_id(request.appointment_id)

        if existing is not None:
            if existing.is_finished():
                if request.regenerate:
                    logger.warning(f"Ignoring link regeneration for finished meeting {request.appointment_id}")
                return EnsureMeetingResult(meeting=existing, created=False)
            if existing.has_join_urls() and not request.regenerate:
                logger.debug(f"Meeting already exists for appointment {request.appointment_id}")
                return EnsureMeetingResult(meeting=existing, created=False)

        links = await self._generate_links(request)

        if existing is not None:
            existing.replace_links(
                link_provider=links.link_provider,
                provider_join_url=links.provider_join_url,
                patient_join_url=links.patient_join_url,
                backend_meeting_id=links.backend_meeting_id,
                medic_secret=links.medic_secret,
                patient_secret=links.patient_secret,
                data_url=links.data_url,
                valid_from=links.valid_from,
                valid_to=links.valid_to,
            )
            if not await self._meetings.update_links(existing):
                logger.warning(f"Meeting {request.appointment_id} finished while regenerating links, keeping it")
                current = await self._meetings.find_by_appointment_id(request.appointment_id)
                return EnsureMeetingResult(meeting=current or existing, created=False)
            logger.info(f"Regenerated {links.link_provider.value} links for appointment {request.appointment_id}")
            await self._send_invite(existing)
            return EnsureMeetingResult(
                meeting=existing,
                created=False,
                used_fallback=links.fallback_reason is not None,
                fallback_reason=links.fallback_reason,
            )

        meeting = MeetingRecord.create(
            appointment_id=request.appointment_id,
            link_provider=links.link_provider,
            provider_join_url=links.provider_join_url,
            patient_join_url=links.patient_join_url,
            provider_name=request.provider_name,
            patient_name=request.patient_name,
            appointment_time=request.appointment_time,
            patient_id=request.patient_id,
            encounter_id=request.encounter_id,
            provider_id=request.provider_id,
            backend_meeting_id=links.backend_meeting_id,
            medic_secret=links.medic_secret,
            patient_secret=links.patient_secret,
            data_url=links.data_url,
            valid_from=links.valid_from,
            valid_to=links.valid_to,
        )

        stored, created = await self._meetings.insert_or_get(meeting)

        if created:
            logger.info(
                f"Created {stored.link_provider.value} meeting for appointment {request.appointment_id}"
            )
            await self._send_invite(stored)
        else:
            logger.info(f"Concurrent request already created meeting for appointment {request.appointment_id}")

        return EnsureMeetingResult(
            meeting=stored,
            created=created,
            used_fallback=links.fallback_reason is not None,
            fallback_reason=links.fallback_reason,
        )

    async def _generate_links(self, request: EnsureMeetingRequest) -> _GeneratedLinks:
        wants_backend = request.link_provider in (None, LinkProvider.TELESALUD.value)
        local_provider = None if wants_backend else request.link_provider
        fallback_reason: str | None = None

        if wants_backend and self._backend.is_configured:
            try:
                created = await self._backend.create_meeting(
                    appointment_id=request.appointment_id,
                    provider_name=request.provider_name,
                    patient_name=request.patient_name,
                    start_time=request.appointment_time,
                    patient_id=request.patient_id,
                    patient_phone=request.patient_phone,
                )
                return _GeneratedLinks(
                    link_provider=LinkProvider.TELESALUD,
                    provider_join_url=created.provider_join_url,
                    patient_join_url=created.patient_join_url,
                    backend_meeting_id=created.backend_meeting_id,
                    medic_secret=created.medic_id,
                    patient_secret=created.patient_secret,
                    data_url=created.data_url,
                    valid_from=created.valid_from,
                    valid_to=created.valid_to,
                )
            except (BackendRejected, BackendError, MalformedResponse, ConfigurationMissing) as e:
                fallback_reason = f"{e.code}: {e.message}"
                logger.warning(
                    f"Telesalud backend failed for appointment {request.appointment_id}, "
                    f"using local provider: {fallback_reason}"
                )

        links = self._links.generate(request.appointment_id, local_provider)
        return _GeneratedLinks(
            link_provider=links.provider,
            provider_join_url=links.provider_url,
            patient_join_url=links.patient_url,
            medic_secret=links.slug,
            patient_secret=links.slug,
            fallback_reason=fallback_reason,
        )

    async def _send_invite(self, meeting: MeetingRecord) -> None:
        try:
            await self._invites.send_invite(MeetingInvite.for_meeting(meeting))
        except Exception as e:
            logger.error(f"Failed to send invite for appointment {meeting.appointment_id}: {e}")
