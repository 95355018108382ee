"""
Telehealth Domain Container.

Single Responsibility: Wire all telehealth domain dependencies.
"""

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from app.domains.telehealth.application.hooks import TelehealthEventHooks
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
from app.domains.telehealth.domain.services import MeetingLinkProvider
from app.domains.telehealth.infrastructure.adapters import (
    LoggingAppointmentStatusGateway,
    LoggingInviteSender,
    SQLAlchemyEncounterNoteWriter,
)
from app.domains.telehealth.infrastructure.repositories import (
    SQLAlchemyMeetingRepository,
    SQLAlchemyNotificationRepository,
    SQLAlchemyReminderLog,
    SQLAlchemyWebhookAuditLog,
)
from app.domains.telehealth.infrastructure.scheduler import ReminderScheduler

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer

logger = logging.getLogger(__name__)


class TelehealthContainer:
    """
    Telehealth domain container.

    Single Responsibility: Create telehealth repositories, adapters and use cases.
    Host integrations replace the default adapters by overriding the create_* methods.
    """

    def __init__(self, base: "BaseContainer"):
        """
        Initialize telehealth container.

        Args:
            base: BaseContainer with shared singletons
        """
        self._base = base

    # ==================== REPOSITORIES ====================

    def create_meeting_repository(self, db) -> SQLAlchemyMeetingRepository:
        """Create Meeting Repository."""
        return SQLAlchemyMeetingRepository(session=db)

    def create_notification_repository(self, db) -> SQLAlchemyNotificationRepository:
        """Create Notification Repository."""
        return SQLAlchemyNotificationRepository(session=db)

    def create_webhook_audit_log(self, db) -> SQLAlchemyWebhookAuditLog:
        return SQLAlchemyWebhookAuditLog(session=db)

    def create_reminder_log(self, db) -> SQLAlchemyReminderLog:
        return SQLAlchemyReminderLog(session=db)

    # ==================== HOST ADAPTERS ====================

    def create_encounter_note_writer(self, db) -> SQLAlchemyEncounterNoteWriter:
        return SQLAlchemyEncounterNoteWriter(session=db)

    def create_appointment_status_gateway(self) -> LoggingAppointmentStatusGateway:
        return LoggingAppointmentStatusGateway()

    def create_invite_sender(self) -> LoggingInviteSender:
        return LoggingInviteSender(sms_enabled=self._base.settings.TELEHEALTH_SMS_INVITES)

    def create_link_provider(self) -> MeetingLinkProvider:
        return MeetingLinkProvider(self._base.link_config)

    # ==================== USE CASES ====================

    def create_ensure_meeting_use_case(self, db) -> EnsureMeetingUseCase:
        """Create EnsureMeetingUseCase with dependencies."""
        return EnsureMeetingUseCase(
            meeting_repository=self.create_meeting_repository(db),
            backend_client=self._base.get_telesalud_client(),
            link_provider=self.create_link_provider(),
            invite_sender=self.create_invite_sender(),
        )

    def create_ingest_webhook_use_case(self, db) -> IngestWebhookUseCase:
        """Create IngestWebhookUseCase with dependencies."""
        return IngestWebhookUseCase(
            meeting_repository=self.create_meeting_repository(db),
            notification_repository=self.create_notification_repository(db),
            note_writer=self.create_encounter_note_writer(db),
            appointment_gateway=self.create_appointment_status_gateway(),
            audit_log=self.create_webhook_audit_log(db),
        )

    def create_list_unread_notifications_use_case(self, db) -> ListUnreadNotificationsUseCase:
        return ListUnreadNotificationsUseCase(self.create_notification_repository(db))

    def create_mark_notifications_read_use_case(self, db) -> MarkNotificationsReadUseCase:
        return MarkNotificationsReadUseCase(self.create_notification_repository(db))

    def create_get_meeting_use_case(self, db) -> GetMeetingUseCase:
        minutes = self._base.settings.TELEHEALTH_JOIN_WINDOW_MINUTES
        return GetMeetingUseCase(
            meeting_repository=self.create_meeting_repository(db),
            backend_client=self._base.get_telesalud_client(),
            join_window=timedelta(minutes=minutes) if minutes > 0 else None,
        )

    def create_amend_notes_use_case(self, db) -> AmendClinicalNotesUseCase:
        return AmendClinicalNotesUseCase(self.create_meeting_repository(db))

    def create_check_backend_use_case(self) -> CheckBackendConnectionUseCase:
        return CheckBackendConnectionUseCase(
            backend_client=self._base.get_telesalud_client(),
            local_provider=self._base.link_config.provider,
        )

    def create_list_backend_meetings_use_case(self) -> ListBackendMeetingsUseCase:
        return ListBackendMeetingsUseCase(self._base.get_telesalud_client())

    def create_list_upcoming_meetings_use_case(self, db) -> ListUpcomingMeetingsUseCase:
        return ListUpcomingMeetingsUseCase(
            meeting_repository=self.create_meeting_repository(db),
            timezone_name=self._base.settings.TELEHEALTH_TIMEZONE,
        )

    def create_send_reminders_use_case(self, db) -> SendRemindersUseCase:
        return SendRemindersUseCase(
            meeting_repository=self.create_meeting_repository(db),
            reminder_log=self.create_reminder_log(db),
            invite_sender=self.create_invite_sender(),
            policy=self._base.reminder_policy,
        )

    # ==================== HOST EVENTS ====================

    def create_event_hooks(self, session_factory) -> TelehealthEventHooks:
        """Hooks the host registers on its event dispatcher."""
        return TelehealthEventHooks(
            session_factory=session_factory,
            use_case_factory=self.create_ensure_meeting_use_case,
        )

    # ==================== BACKGROUND JOBS ====================

    def create_reminder_scheduler(self, session_factory) -> ReminderScheduler:
        """Periodic reminder runs. Disabled when no reminder kind is switched on."""
        policy = self._base.reminder_policy
        return ReminderScheduler(
            session_factory=session_factory,
            use_case_factory=self.create_send_reminders_use_case,
            interval_minutes=int(policy.run_interval.total_seconds() // 60),
            timezone_name=policy.timezone_name,
            enabled=policy.enabled,
        )
