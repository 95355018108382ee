"""
Domain Layer - Core DDD building blocks

- Entities: Objects with identity and lifecycle
- Exceptions: Domain-specific error handling
"""

from app.core.domain.entities import AggregateRoot, Entity
from app.core.domain.exceptions import DomainException, InvalidOperationException

__all__ = [
    "AggregateRoot",
    "DomainException",
    "Entity",
    "InvalidOperationException",
]
