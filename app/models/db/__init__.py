"""
Database models.

Domain tables are declared next to their domain
(app/domains/<domain>/infrastructure/persistence/sqlalchemy/models.py).
"""

from .base import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
