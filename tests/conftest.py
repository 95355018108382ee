"""
Shared pytest fixtures for all tests.

Provides settings, in-memory port implementations and ready-wired use cases
for the telehealth bridge.
"""

import os
from datetime import timedelta

import pytest

# Ensure test environment before any settings are loaded
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("DB_NAME", "telehealth_test")

from app.domains.telehealth.application.use_cases import (  # noqa: E402
    EnsureMeetingUseCase,
    GetMeetingUseCase,
    IngestWebhookUseCase,
)
from app.domains.telehealth.domain.services import LinkProviderConfig, MeetingLinkProvider  # noqa: E402
from app.domains.telehealth.infrastructure.external.telesalud import RemoteBackendConfig  # noqa: E402
from tests.utils import (  # noqa: E402
    FakeBackendClient,
    InMemoryMeetingRepository,
    InMemoryNotificationRepository,
    MeetingBuilder,
    RecordingAppointmentGateway,
    RecordingAuditLog,
    RecordingInviteSender,
    RecordingNoteWriter,
)

FIXED_SLUG = "a1b2c3d4e5"


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture
def backend_config() -> RemoteBackendConfig:
    """Configured backend with zero backoff so retry tests run instantly."""
    return RemoteBackendConfig(
        base_url="https://tele.example.org",
        api_token="test-token",
        notification_url="https://emr.example.org/api/v1/telehealth/webhook",
        max_attempts=3,
        retry_base_delay=0,
        retry_max_delay=0,
        retry_jitter=0,
    )


@pytest.fixture
def link_config() -> LinkProviderConfig:
    return LinkProviderConfig(
        provider="jitsi",
        jitsi_base_url="https://meet.jit.si",
        doxy_room_url="https://doxy.me/drgomez",
        doximity_room_url=None,
        template_url="https://rooms.example.org/{{slug}}/join",
    )


@pytest.fixture
def link_provider(link_config) -> MeetingLinkProvider:
    return MeetingLinkProvider(link_config, slug_factory=lambda: FIXED_SLUG)


# ============================================================================
# PORT FIXTURES
# ============================================================================


@pytest.fixture
def meeting_repository() -> InMemoryMeetingRepository:
    return InMemoryMeetingRepository()


@pytest.fixture
def notification_repository() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


@pytest.fixture
def backend_client() -> FakeBackendClient:
    return FakeBackendClient()


@pytest.fixture
def note_writer() -> RecordingNoteWriter:
    return RecordingNoteWriter()


@pytest.fixture
def appointment_gateway() -> RecordingAppointmentGateway:
    return RecordingAppointmentGateway()


@pytest.fixture
def invite_sender() -> RecordingInviteSender:
    return RecordingInviteSender()


@pytest.fixture
def audit_log() -> RecordingAuditLog:
    return RecordingAuditLog()


@pytest.fixture
def meeting_builder() -> MeetingBuilder:
    return MeetingBuilder()


# ============================================================================
# USE CASE FIXTURES
# ============================================================================


@pytest.fixture
def ensure_meeting_use_case(meeting_repository, backend_client, link_provider, invite_sender):
    return EnsureMeetingUseCase(
        meeting_repository=meeting_repository,
        backend_client=backend_client,
        link_provider=link_provider,
        invite_sender=invite_sender,
    )


@pytest.fixture
def ingest_webhook_use_case(meeting_repository, notification_repository, note_writer, appointment_gateway, audit_log):
    return IngestWebhookUseCase(
        meeting_repository=meeting_repository,
        notification_repository=notification_repository,
        note_writer=note_writer,
        appointment_gateway=appointment_gateway,
        audit_log=audit_log,
    )


@pytest.fixture
def get_meeting_use_case(meeting_repository, backend_client):
    return GetMeetingUseCase(
        meeting_repository=meeting_repository,
        backend_client=backend_client,
        join_window=timedelta(minutes=120),
    )
