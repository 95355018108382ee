"""
Declarative base and shared column mixins.

Constraint and index names follow NAMING_CONVENTION so that alembic
migrations can refer to them by a stable name.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, MetaData
from sqlalchemy.orm import declarative_base

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


def utcnow() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    """Creation and update times, timezone-aware UTC like the domain entities."""

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
