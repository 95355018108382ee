"""Backend connectivity check and meeting listing."""

import logging
from typing import TYPE_CHECKING, Any

from ..dto import UseCaseResult

if TYPE_CHECKING:
    from ..ports import IRemoteBackendClient

logger = logging.getLogger(__name__)


class CheckBackendConnectionUseCase:
    def __init__(self, backend_client: "IRemoteBackendClient", local_provider: str) -> None:
        self._backend = backend_client
        self._local_provider = local_provider

    async def execute(self) -> UseCaseResult:
        if not self._backend.is_configured:
            return UseCaseResult.ok(data={"connected": False, "mode": "standalone", "provider": self._local_provider})

        connected = await self._backend.test_connection()
        if not connected:
            logger.warning("Telesalud backend connection test failed")
        return UseCaseResult.ok(data={"connected": connected, "mode": "telesalud", "provider": "telesalud"})


class ListBackendMeetingsUseCase:
    """Pass-through listing of the backend's meetings.

    Backend and configuration errors propagate; the HTTP layer maps them.
    """

    def __init__(self, backend_client: "IRemoteBackendClient") -> None:
        self._backend = backend_client

    async def execute(
        self,
        filters: dict[str, Any] | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> UseCaseResult:
        response = await self._backend.list_meetings(filters, page=page, per_page=per_page)
        return UseCaseResult.ok(data=response)
