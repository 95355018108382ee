"""Telehealth API layer."""

from app.domains.telehealth.api.routes import router

__all__ = ["router"]
