# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor principal de inyección de dependencias (singleton).
#              Compone los sub-contenedores de dominio.
# ============================================================================
"""
Dependency Injection Container.

Centralized container for creating and managing all application dependencies.
Implements Dependency Inversion Principle by wiring concrete implementations to interfaces.
"""

from __future__ import annotations

import logging

from app.config.settings import Settings

from .base import BaseContainer
from .telehealth import TelehealthContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize container with all domain sub-containers.

        Args:
            settings: Optional settings override
        """
        self._base = BaseContainer(settings)
        self._telehealth = TelehealthContainer(self._base)

        logger.info("DependencyContainer initialized")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def base(self) -> BaseContainer:
        return self._base

    @property
    def telehealth(self) -> TelehealthContainer:
        return self._telehealth

    async def close(self) -> None:
        await self._base.close()


# Global container instance
_container: DependencyContainer | None = None


def get_container(settings: Settings | None = None) -> DependencyContainer:
    """
    Get global container instance (singleton).

    Args:
        settings: Optional settings (only used on first call)

    Returns:
        DependencyContainer instance
    """
    global _container

    if _container is None:
        logger.info("Initializing global DependencyContainer")
        _container = DependencyContainer(settings)
    elif settings is not None:
        logger.warning(
            "Container already initialized, ignoring new settings. "
            "Call reset_container() first to change settings."
        )

    return _container


def reset_container() -> None:
    """
    Reset global container instance.

    Useful for testing or configuration changes.
    """
    global _container
    logger.info("Resetting global DependencyContainer")
    _container = None


__all__ = [
    "BaseContainer",
    "DependencyContainer",
    "TelehealthContainer",
    "get_container",
    "reset_container",
]
