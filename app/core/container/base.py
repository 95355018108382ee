# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor base con singletons compartidos (cliente HTTP de
#              telesalud y configuración derivada de Settings).
# ============================================================================
"""
Base Container - Shared Singletons.

Single Responsibility: Manage shared resources (backend HTTP client, config value objects).
"""

import logging

from app.config.settings import Settings, get_settings
from app.domains.telehealth.domain.services import LinkProviderConfig, ReminderPolicy
from app.domains.telehealth.infrastructure.external.telesalud import RemoteBackendConfig, TelesaludClient

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.

    Single Responsibility: Create and cache resources shared across requests.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize base container.

        Args:
            settings: Optional settings override
        """
        self.settings = settings or get_settings()

        # Value objects built once from settings
        self.backend_config = RemoteBackendConfig.from_settings(self.settings)
        self.link_config = LinkProviderConfig.from_settings(self.settings)
        self.reminder_policy = ReminderPolicy.from_settings(self.settings)

        # Singletons
        self._telesalud_client: TelesaludClient | None = None

        logger.info(
            f"BaseContainer initialized (mode={'telesalud' if self.backend_config.is_configured else 'standalone'}, "
            f"local provider={self.link_config.provider})"
        )

    def get_telesalud_client(self) -> TelesaludClient:
        """
        Get telesalud client (singleton).

        The persistent AsyncClient is created lazily on first request and
        closed by close().
        """
        if self._telesalud_client is None:
            self._telesalud_client = TelesaludClient(self.backend_config)
        return self._telesalud_client

    async def close(self) -> None:
        """Release shared resources."""
        if self._telesalud_client is not None:
            await self._telesalud_client.close()
            self._telesalud_client = None
