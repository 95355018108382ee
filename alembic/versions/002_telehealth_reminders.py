"""telehealth_reminders

Revision ID: 002_telehealth_reminders
Revises: 001_telehealth_baseline
Create Date: 2026-10-19

Adds patient reminders:
- telehealth_reminders: one row per reminder sent (day-before, hour-before)
- ix_telehealth_meetings_appointment_time: range scans for due reminders
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002_telehealth_reminders"
down_revision: Union[str, Sequence[str], None] = "001_telehealth_baseline"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

reminder_kind_enum = postgresql.ENUM("day", "hour", name="telehealth_reminder_kind", create_type=False)


def upgrade() -> None:
    """Create the reminder ledger and the appointment time index."""
    reminder_kind_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "telehealth_reminders",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("meeting_id", sa.Integer(), nullable=False),
        sa.Column("appointment_id", sa.String(64), nullable=False),
        sa.Column("kind", reminder_kind_enum, nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("id", name="pk_telehealth_reminders"),
        sa.ForeignKeyConstraint(
            ["meeting_id"],
            ["telehealth_meetings.id"],
            name="fk_telehealth_reminders_meeting_id_telehealth_meetings",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("meeting_id", "kind", name="uq_telehealth_reminders_meeting_id_kind"),
    )
    op.create_index("ix_telehealth_reminders_appointment_id", "telehealth_reminders", ["appointment_id"])
    op.create_index("ix_telehealth_meetings_appointment_time", "telehealth_meetings", ["appointment_time"])


def downgrade() -> None:
    """Drop the reminder ledger."""
    op.drop_index("ix_telehealth_meetings_appointment_time", table_name="telehealth_meetings")
    op.drop_index("ix_telehealth_reminders_appointment_id", table_name="telehealth_reminders")
    op.drop_table("telehealth_reminders")
    reminder_kind_enum.drop(op.get_bind(), checkfirst=True)
