# ============================================================================
# SCOPE: GLOBAL
# Description: Cliente HTTP para la API de Telesalud (videoconsultas) con
#              retry automático, fallback de endpoints y reescritura de URLs.
# ============================================================================
"""
Telesalud API Client.

Single Responsibility: Reliable, authenticated access to the telesalud
videoconsultation backend.

Endpoints:
- POST /videoconsultation           create a meeting
- GET  /videoconsultation/data      meeting detail (?vc=&medic=)
- GET  /videoconsultation           list meetings
Each has an /api-prefixed alternate, tried once when the primary route is missing.

Retry Strategy:
- Network errors / timeouts: retry (BackendUnavailable)
- 5xx: retry with exponential backoff + jitter (BackendError)
- 4xx / malformed JSON: fail immediately
"""

import logging
from datetime import UTC, datetime
from typing import Any
from urllib.parse import parse_qs, urlsplit

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
    wait_random,
)
from tenacity.wait import wait_base

from app.domains.telehealth.application.dto import BackendMeeting
from app.domains.telehealth.domain.exceptions import (
    BackendError,
    BackendRejected,
    BackendUnavailable,
    ConfigurationMissing,
    MalformedResponse,
    NotFound,
    RouteNotFound,
    TelehealthError,
)

from .config import RemoteBackendConfig
from .url_rewriter import UrlRewriter

logger = logging.getLogger(__name__)

CREATE_PATHS = ("/videoconsultation", "/api/videoconsultation")
DATA_PATHS = ("/videoconsultation/data", "/api/videoconsultation/data")
LIST_PATHS = CREATE_PATHS

INTEGRATION_NAME = "telehealth-bridge"
VALIDATION_STATUS_CODES = frozenset({400, 422})
REQUIRED_MEETING_FIELDS = ("id", "medic_url", "patient_url")


def backoff_wait(config: RemoteBackendConfig) -> wait_base:
    """
    Delay before retry n: min(base * 2^(n-1), max) plus uniform jitter in [0, jitter).

    With the defaults that is 1s, 2s, 4s, then 5s per retry, each plus up to 1s.
    """
    return wait_exponential(multiplier=config.retry_base_delay, max=config.retry_max_delay) + wait_random(
        0, config.retry_jitter
    )


class TelesaludClient:
    """
    HTTP client for the telesalud API.

    Uses a persistent AsyncClient (connection reuse). Every successful
    response goes through the UrlRewriter before reaching the caller.
    """

    def __init__(
        self,
        config: RemoteBackendConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Backend configuration value object
            http_client: Optional pre-built AsyncClient (closed by the caller)
        """
        self._config = config
        self._client = http_client
        self._owns_client = http_client is None
        self._rewriter = UrlRewriter(
            config.rewrite_host,
            config.public_https_url,
            config.public_http_url,
        )

    @property
    def config(self) -> RemoteBackendConfig:
        return self._config

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    async def initialize(self) -> None:
        """Initialize persistent HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout, connect=self._config.connect_timeout),
            )
            self._owns_client = True

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "TelesaludClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            await self.initialize()
        return self._client  # type: ignore

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.api_token or ''}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    # =========================================================================
    # Public operations
    # =========================================================================

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
    ) -> BackendMeeting:
        """
        Create a videoconsultation.

        Args:
            appointment_id: Host appointment id (sent back in extra)
            provider_name: Medic display name
            patient_name: Patient display name
            start_time: Timezone-aware appointment start
            patient_id: Host patient id
            patient_phone: Optional phone for backend-side SMS
            days_before_expiration: Link lifetime, defaults to the configured value

        Returns:
            BackendMeeting with public join URLs

        Raises:
            ValueError: Naive start_time or non-positive expiration
            ConfigurationMissing: Base URL or token not configured
            BackendUnavailable / BackendError / BackendRejected / MalformedResponse
        """
        if start_time.tzinfo is None or start_time.utcoffset() is None:
            raise ValueError("start_time must be timezone-aware")
        days = days_before_expiration if days_before_expiration is not None else self._config.days_before_expiration
        if days < 1:
            raise ValueError("days_before_expiration must be a positive integer")

        body: dict[str, Any] = {
            "appointment_date": start_time.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S"),
            "days_before_expiration": days,
            "medic_name": provider_name,
            "patient_name": patient_name,
            "patient_id": patient_id or "",
            "extra": {
                "appointment_id": appointment_id,
                "integration": INTEGRATION_NAME,
                "notification_url": self._config.notification_url or "",
            },
        }
        if patient_phone:
            body["patient_number"] = patient_phone

        logger.info(f"Creating telesalud meeting for appointment {appointment_id}")
        response = await self._request_with_fallback("POST", CREATE_PATHS, json=body)
        meeting = self._parse_meeting(response)
        logger.info(f"Telesalud meeting {meeting.backend_meeting_id} created for appointment {appointment_id}")
        return meeting

    async def get_meeting(self, backend_id: str, medic_id: str) -> dict[str, Any]:
        """
        Fetch meeting detail.

        Raises:
            NotFound: Backend reports no such meeting
        """
        params = {"vc": backend_id, "medic": medic_id}
        try:
            response = await self._request_with_fallback("GET", DATA_PATHS, params=params)
        except BackendRejected as e:
            if e.status_code == 404 and not isinstance(e, RouteNotFound):
                raise NotFound(backend_id) from e
            raise

        if response.get("success") is False:
            raise NotFound(backend_id)
        data = response.get("data", response)
        if not isinstance(data, dict):
            raise MalformedResponse("Meeting detail is not an object")
        return data

    async def list_meetings(
        self,
        filters: dict[str, Any] | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> dict[str, Any]:
        """List meetings with optional backend filters."""
        params: dict[str, Any] = {"page": page, "per_page": per_page}
        params.update({key: value for key, value in (filters or {}).items() if value is not None})
        return await self._request_with_fallback("GET", LIST_PATHS, params=params)

    async def test_connection(self) -> bool:
        """
        Check connectivity with a deliberately incomplete request.

        A validation error (400/422) proves the API is reachable and
        authenticated; so does any successful JSON response.
        """
        if not self.is_configured:
            return False
        body = {
            "appointment_date": datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S"),
            "extra": {"test_connection": True},
        }
        try:
            await self._request_with_fallback("POST", CREATE_PATHS, json=body)
            return True
        except BackendRejected as e:
            if e.status_code in VALIDATION_STATUS_CODES:
                return True
            logger.warning(f"Telesalud connection test rejected: {e.message}")
            return False
        except TelehealthError as e:
            logger.warning(f"Telesalud connection test failed: {e.message}")
            return False

    # =========================================================================
    # Request pipeline
    # =========================================================================

    async def _request_with_fallback(
        self,
        method: str,
        paths: tuple[str, str],
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Try the primary path, then the alternate once if the route is missing."""
        primary, alternate = paths
        try:
            return await self._request(method, primary, json=json, params=params)
        except RouteNotFound:
            logger.info(f"Route {primary} not found, trying {alternate}")
        try:
            return await self._request(method, alternate, json=json, params=params)
        except RouteNotFound as e:
            raise BackendRejected(f"Neither {primary} nor {alternate} exist on the backend", 404) from e

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send a request with retry/backoff and rewrite the response URLs.

        Raises:
            BackendError: Retries exhausted (BackendUnavailable for network errors)
            BackendRejected / MalformedResponse: Immediately
        """
        if not self.is_configured:
            raise ConfigurationMissing("TELESALUD_API_URL", "Telesalud API URL and token are required")
        # Checked before sending so a meeting is never created whose links cannot be made public
        if not self._rewriter.is_complete:
            raise ConfigurationMissing(
                "TELESALUD_PUBLIC_HTTPS_URL",
                "TELESALUD_INTERNAL_HOST is set but no public URL is configured",
            )

        retrying = AsyncRetrying(
            retry=retry_if_exception_type(BackendError),
            stop=stop_after_attempt(self._config.max_attempts) | stop_after_delay(self._config.deadline),
            wait=backoff_wait(self._config),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )

        try:
            async for attempt in retrying:
                with attempt:
                    payload = await self._send(method, path, json=json, params=params)
        except RetryError as e:
            last_exception = e.last_attempt.exception()
            attempts = e.last_attempt.attempt_number
            if isinstance(last_exception, BackendUnavailable):
                raise BackendUnavailable(
                    f"Telesalud unreachable after {attempts} attempts: {last_exception.message}"
                ) from last_exception
            status_code = getattr(last_exception, "status_code", None)
            raise BackendError(
                f"Telesalud request failed after {attempts} attempts: {last_exception}",
                status_code=status_code,
            ) from last_exception

        return self._rewriter.rewrite(payload)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Single HTTP attempt, classified into the exception taxonomy."""
        client = await self._ensure_client()
        url = f"{self._config.normalized_base_url}{path}"

        try:
            response = await client.request(method, url, json=json, params=params, headers=self._get_headers())
        except httpx.TransportError as e:
            logger.warning(f"Telesalud network error on {method} {path}: {e!r}")
            raise BackendUnavailable(f"Network error calling {path}: {e!r}") from e

        if response.status_code >= 500:
            error_preview = response.text[:200] if response.text else "No body"
            logger.warning(f"Telesalud server error {response.status_code} on {path}: {error_preview}")
            raise BackendError(
                f"Telesalud server error {response.status_code}: {error_preview}",
                status_code=response.status_code,
            )

        body = self._decode(response)

        if response.status_code == 404 and not isinstance(body, dict):
            raise RouteNotFound(path)

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise BackendRejected(
                message or f"Telesalud rejected request with status {response.status_code}",
                response.status_code,
                body,
            )

        if not isinstance(body, dict):
            raise MalformedResponse(f"Invalid JSON response from {path}")
        return body

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decoded JSON body, or None when the body is empty or not JSON."""
        if not response.content or not response.text.strip():
            return None
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _parse_meeting(response: dict[str, Any]) -> BackendMeeting:
        if response.get("success") is not True:
            raise MalformedResponse(response.get("message") or "Telesalud response did not report success")

        data = response.get("data")
        if not isinstance(data, dict):
            raise MalformedResponse("Telesalud response has no data object", ["data"])

        missing = [name for name in REQUIRED_MEETING_FIELDS if not data.get(name)]
        if missing:
            raise MalformedResponse(f"Telesalud response missing fields: {', '.join(missing)}", missing)

        backend_id = str(data["id"])
        medic_url = str(data["medic_url"])
        patient_url = str(data["patient_url"])

        return BackendMeeting(
            backend_meeting_id=backend_id,
            medic_id=_query_param(medic_url, "medic") or backend_id,
            provider_join_url=medic_url,
            patient_join_url=patient_url,
            patient_secret=_query_param(patient_url, "patient"),
            data_url=data.get("data_url"),
            valid_from=data.get("valid_from"),
            valid_to=data.get("valid_to"),
            raw=data,
        )


def _query_param(url: str, name: str) -> str | None:
    values = parse_qs(urlsplit(url).query).get(name)
    return values[0] if values else None
