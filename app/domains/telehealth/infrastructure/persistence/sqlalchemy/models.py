"""
Telehealth SQLAlchemy Models

Database models for telehealth meetings, notifications, webhook audit log,
the encounter notes written when a consultation finishes and the ledger of
patient reminders already sent.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from app.domains.telehealth.domain.value_objects import LinkProvider, MeetingStatus, NotificationTopic, ReminderKind
from app.models.db.base import Base, TimestampMixin


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class MeetingModel(Base, TimestampMixin):
    """SQLAlchemy model for MeetingRecord entity."""

    __tablename__ = "telehealth_meetings"

    id = Column(Integer, primary_key=True, index=True)

    # Host references (one meeting per appointment)
    appointment_id = Column(String(64), nullable=False)
    patient_id = Column(String(64), nullable=True, index=True)
    encounter_id = Column(String(64), nullable=True)
    provider_id = Column(String(64), nullable=True)

    # Participants
    provider_name = Column(String(255), nullable=False, default="")
    patient_name = Column(String(255), nullable=False, default="")
    appointment_time = Column(DateTime(timezone=True), nullable=True, index=True)

    # Links
    link_provider = Column(
        SQLEnum(LinkProvider, name="telehealth_link_provider", values_callable=_enum_values),
        nullable=False,
    )
    backend_meeting_id = Column(String(128), nullable=True, index=True)
    medic_secret = Column(String(128), nullable=True, index=True)
    patient_secret = Column(String(128), nullable=True, index=True)
    provider_join_url = Column(Text, nullable=True)
    patient_join_url = Column(Text, nullable=True)
    data_url = Column(Text, nullable=True)
    valid_from = Column(String(32), nullable=True)
    valid_to = Column(String(32), nullable=True)

    # Lifecycle
    status = Column(
        SQLEnum(MeetingStatus, name="telehealth_meeting_status", values_callable=_enum_values),
        nullable=False,
        default=MeetingStatus.SCHEDULED,
    )
    clinical_notes = Column(Text, nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("appointment_id", name="uq_telehealth_meetings_appointment_id"),)

    def __repr__(self) -> str:
        return f"<MeetingModel(appointment_id={self.appointment_id}, status={self.status})>"


class NotificationModel(Base):
    """SQLAlchemy model for NotificationEvent entity."""

    __tablename__ = "telehealth_notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)

    appointment_id = Column(String(64), nullable=False, index=True)
    patient_id = Column(String(64), nullable=True)
    encounter_id = Column(String(64), nullable=True)
    backend_meeting_id = Column(String(128), nullable=True)
    meeting_url = Column(Text, nullable=True)

    topic = Column(
        SQLEnum(NotificationTopic, name="telehealth_notification_topic", values_callable=_enum_values),
        nullable=False,
    )
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    patient_display_name = Column(String(255), nullable=False, default="")

    is_read = Column(Boolean, nullable=False, default=False)
    assigned_provider_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))

    __table_args__ = (
        Index("ix_telehealth_notifications_created_read", "created_at", "is_read"),
        Index("ix_telehealth_notifications_provider_read", "assigned_provider_id", "is_read"),
    )


class WebhookLogModel(Base):
    """Audit trail of every webhook received."""

    __tablename__ = "telehealth_webhook_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    identifier = Column(String(128), nullable=False, index=True)
    status = Column(String(32), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))


class EncounterNoteModel(Base):
    """Clinical note written once per finished consultation."""

    __tablename__ = "telehealth_encounter_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    meeting_id = Column(Integer, ForeignKey("telehealth_meetings.id", ondelete="CASCADE"), nullable=False)
    appointment_id = Column(String(64), nullable=False, index=True)
    patient_id = Column(String(64), nullable=True)
    encounter_id = Column(String(64), nullable=True)
    backend_meeting_id = Column(String(128), nullable=True)
    visit_type = Column(String(100), nullable=False, default="Telehealth Consultation")
    form_name = Column(String(100), nullable=False, default="Telehealth Visit Notes")
    author = Column(String(100), nullable=False, default="telehealth-system")
    note_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))

    __table_args__ = (UniqueConstraint("meeting_id", name="uq_telehealth_encounter_notes_meeting_id"),)


class ReminderModel(Base):
    """One row per reminder sent. The unique key makes each kind go out once per meeting."""

    __tablename__ = "telehealth_reminders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    meeting_id = Column(Integer, ForeignKey("telehealth_meetings.id", ondelete="CASCADE"), nullable=False)
    appointment_id = Column(String(64), nullable=False, index=True)
    kind = Column(
        SQLEnum(ReminderKind, name="telehealth_reminder_kind", values_callable=_enum_values),
        nullable=False,
    )
    sent_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))

    __table_args__ = (UniqueConstraint("meeting_id", "kind", name="uq_telehealth_reminders_meeting_id_kind"),)
