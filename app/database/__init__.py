"""Async database access (SQLAlchemy + asyncpg)."""

from app.database.async_db import (
    AsyncSessionLocal,
    async_engine,
    close_async_engine,
    get_async_db,
    get_async_db_context,
)

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "close_async_engine",
    "get_async_db",
    "get_async_db_context",
]
