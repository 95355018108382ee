"""telehealth_baseline

Revision ID: 001_telehealth_baseline
Revises: None
Create Date: 2026-10-19

Creates the telehealth bridge schema:
- telehealth_meetings: one videoconference per appointment
- telehealth_notifications: provider-facing lifecycle notifications
- telehealth_webhook_log: audit trail of inbound webhooks
- telehealth_encounter_notes: clinical note per finished consultation
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_telehealth_baseline"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LINK_PROVIDERS = ("telesalud", "jitsi", "google_meet", "doxy_me", "doximity", "template")
MEETING_STATUSES = ("scheduled", "provider_joined", "patient_joined", "in_progress", "finished")
NOTIFICATION_TOPICS = (
    "patient-waiting",
    "provider-joined",
    "consultation-started",
    "provider-left",
    "consultation-finished",
    "backend-event",
)

link_provider_enum = postgresql.ENUM(*LINK_PROVIDERS, name="telehealth_link_provider", create_type=False)
meeting_status_enum = postgresql.ENUM(*MEETING_STATUSES, name="telehealth_meeting_status", create_type=False)
notification_topic_enum = postgresql.ENUM(
    *NOTIFICATION_TOPICS, name="telehealth_notification_topic", create_type=False
)


def upgrade() -> None:
    """Create telehealth tables, enum types and indexes."""

    bind = op.get_bind()
    link_provider_enum.create(bind, checkfirst=True)
    meeting_status_enum.create(bind, checkfirst=True)
    notification_topic_enum.create(bind, checkfirst=True)

    # ==========================================================================
    # 1. Meetings
    # ==========================================================================
    op.create_table(
        "telehealth_meetings",
        sa.Column("id", sa.Integer(), nullable=False),
        # Host references
        sa.Column("appointment_id", sa.String(64), nullable=False, comment="Host appointment id"),
        sa.Column("patient_id", sa.String(64), nullable=True),
        sa.Column("encounter_id", sa.String(64), nullable=True),
        sa.Column("provider_id", sa.String(64), nullable=True),
        # Participants
        sa.Column("provider_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("patient_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("appointment_time", sa.DateTime(timezone=True), nullable=True),
        # Links
        sa.Column("link_provider", link_provider_enum, nullable=False),
        sa.Column(
            "backend_meeting_id",
            sa.String(128),
            nullable=True,
            comment="Set only when the telesalud backend issued the links",
        ),
        sa.Column("medic_secret", sa.String(128), nullable=True),
        sa.Column("patient_secret", sa.String(128), nullable=True),
        sa.Column("provider_join_url", sa.Text(), nullable=True),
        sa.Column("patient_join_url", sa.Text(), nullable=True),
        sa.Column("data_url", sa.Text(), nullable=True),
        sa.Column("valid_from", sa.String(32), nullable=True),
        sa.Column("valid_to", sa.String(32), nullable=True),
        # Lifecycle
        sa.Column("status", meeting_status_enum, nullable=False, server_default="scheduled"),
        sa.Column("clinical_notes", sa.Text(), nullable=True),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("id", name="pk_telehealth_meetings"),
        sa.UniqueConstraint("appointment_id", name="uq_telehealth_meetings_appointment_id"),
    )
    op.create_index("ix_telehealth_meetings_id", "telehealth_meetings", ["id"])
    op.create_index("ix_telehealth_meetings_patient_id", "telehealth_meetings", ["patient_id"])
    op.create_index("ix_telehealth_meetings_backend_meeting_id", "telehealth_meetings", ["backend_meeting_id"])
    op.create_index("ix_telehealth_meetings_medic_secret", "telehealth_meetings", ["medic_secret"])
    op.create_index("ix_telehealth_meetings_patient_secret", "telehealth_meetings", ["patient_secret"])

    # ==========================================================================
    # 2. Notifications
    # ==========================================================================
    op.create_table(
        "telehealth_notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("appointment_id", sa.String(64), nullable=False),
        sa.Column("patient_id", sa.String(64), nullable=True),
        sa.Column("encounter_id", sa.String(64), nullable=True),
        sa.Column("backend_meeting_id", sa.String(128), nullable=True),
        sa.Column("meeting_url", sa.Text(), nullable=True),
        sa.Column("topic", notification_topic_enum, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("patient_display_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "assigned_provider_id",
            sa.String(64),
            nullable=True,
            comment="NULL means visible to every provider",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("id", name="pk_telehealth_notifications"),
    )
    op.create_index("ix_telehealth_notifications_appointment_id", "telehealth_notifications", ["appointment_id"])
    op.create_index(
        "ix_telehealth_notifications_created_read",
        "telehealth_notifications",
        ["created_at", "is_read"],
    )
    op.create_index(
        "ix_telehealth_notifications_provider_read",
        "telehealth_notifications",
        ["assigned_provider_id", "is_read"],
    )

    # ==========================================================================
    # 3. Webhook audit log
    # ==========================================================================
    op.create_table(
        "telehealth_webhook_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("identifier", sa.String(128), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("id", name="pk_telehealth_webhook_log"),
    )
    op.create_index("ix_telehealth_webhook_log_identifier", "telehealth_webhook_log", ["identifier"])

    # ==========================================================================
    # 4. Encounter notes
    # ==========================================================================
    op.create_table(
        "telehealth_encounter_notes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("meeting_id", sa.Integer(), nullable=False),
        sa.Column("appointment_id", sa.String(64), nullable=False),
        sa.Column("patient_id", sa.String(64), nullable=True),
        sa.Column("encounter_id", sa.String(64), nullable=True),
        sa.Column("backend_meeting_id", sa.String(128), nullable=True),
        sa.Column("visit_type", sa.String(100), nullable=False, server_default="Telehealth Consultation"),
        sa.Column("form_name", sa.String(100), nullable=False, server_default="Telehealth Visit Notes"),
        sa.Column("author", sa.String(100), nullable=False, server_default="telehealth-system"),
        sa.Column("note_text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("id", name="pk_telehealth_encounter_notes"),
        sa.ForeignKeyConstraint(
            ["meeting_id"],
            ["telehealth_meetings.id"],
            name="fk_telehealth_encounter_notes_meeting_id_telehealth_meetings",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("meeting_id", name="uq_telehealth_encounter_notes_meeting_id"),
    )
    op.create_index("ix_telehealth_encounter_notes_appointment_id", "telehealth_encounter_notes", ["appointment_id"])


def downgrade() -> None:
    """Drop telehealth tables and enum types."""
    op.drop_index("ix_telehealth_encounter_notes_appointment_id", table_name="telehealth_encounter_notes")
    op.drop_table("telehealth_encounter_notes")

    op.drop_index("ix_telehealth_webhook_log_identifier", table_name="telehealth_webhook_log")
    op.drop_table("telehealth_webhook_log")

    op.drop_index("ix_telehealth_notifications_provider_read", table_name="telehealth_notifications")
    op.drop_index("ix_telehealth_notifications_created_read", table_name="telehealth_notifications")
    op.drop_index("ix_telehealth_notifications_appointment_id", table_name="telehealth_notifications")
    op.drop_table("telehealth_notifications")

    for index in (
        "ix_telehealth_meetings_patient_secret",
        "ix_telehealth_meetings_medic_secret",
        "ix_telehealth_meetings_backend_meeting_id",
        "ix_telehealth_meetings_patient_id",
        "ix_telehealth_meetings_id",
    ):
        op.drop_index(index, table_name="telehealth_meetings")
    op.drop_table("telehealth_meetings")

    bind = op.get_bind()
    notification_topic_enum.drop(bind, checkfirst=True)
    meeting_status_enum.drop(bind, checkfirst=True)
    link_provider_enum.drop(bind, checkfirst=True)
