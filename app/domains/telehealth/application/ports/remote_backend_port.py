# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Port for the remote videoconference backend.
# ============================================================================
"""Remote Backend Port."""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..dto import BackendMeeting


@runtime_checkable
class IRemoteBackendClient(Protocol):
    """Interface for the telesalud API.

    Implementations: TelesaludClient
    """

    @property
    def is_configured(self) -> bool:
        """True when base URL and token are both present."""
        ...

    async def create_meeting(
        self,
        appointment_id: str,
        provider_name: str,
        patient_name: str,
        start_time: datetime,
        *,
        patient_id: str | None = None,
        patient_phone: str | None = None,
        days_before_expiration: int | None = None,
    ) -> "BackendMeeting":
        """Create a meeting on the backend.

        Raises:
            BackendUnavailable, BackendRejected, BackendError, MalformedResponse
        """
        ...

    async def get_meeting(self, backend_id: str, medic_id: str) -> dict[str, Any]:
        """Fetch meeting detail. Raises NotFound."""
        ...

    async def list_meetings(
        self,
        filters: dict[str, Any] | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> dict[str, Any]:
        """List backend meetings. Empty filters are not sent."""
        ...

    async def test_connection(self) -> bool:
        """Check connectivity. Never raises."""
        ...
