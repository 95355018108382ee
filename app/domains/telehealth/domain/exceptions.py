"""
Telehealth domain exceptions.

Backend failures are split by retryability: the telesalud client retries
BackendError (which includes BackendUnavailable) and lets every other kind
propagate on the first occurrence.
"""

from typing import Any

from app.core.domain.exceptions import DomainException


class TelehealthError(DomainException):
    """Base exception for the telehealth bridge."""


class ConfigurationMissing(TelehealthError):
    """A required setting is absent."""

    def __init__(self, setting: str, message: str | None = None):
        self.setting = setting
        super().__init__(
            message or f"Required telehealth setting '{setting}' is not configured",
            "CONFIGURATION_MISSING",
            {"setting": setting},
        )


class BackendError(TelehealthError):
    """The remote backend failed (5xx). Retryable."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, "BACKEND_ERROR", details)


class BackendUnavailable(BackendError):
    """Network error or timeout talking to the remote backend. Retryable."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details=details)
        self.code = "BACKEND_UNAVAILABLE"


class BackendRejected(TelehealthError):
    """The remote backend rejected the request (4xx). Not retryable."""

    def __init__(self, message: str, status_code: int, response_body: Any = None):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, "BACKEND_REJECTED", {"status_code": status_code})


class RouteNotFound(BackendRejected):
    """The requested path does not exist on the backend (non-JSON 404)."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Backend route not found: {path}", 404)


class MalformedResponse(TelehealthError):
    """Invalid JSON or missing required fields. Not retryable."""

    def __init__(self, message: str, missing_fields: list[str] | None = None):
        self.missing_fields = missing_fields or []
        details = {"missing_fields": self.missing_fields} if self.missing_fields else {}
        super().__init__(message, "MALFORMED_RESPONSE", details)


class NotFound(TelehealthError):
    """The backend reports no such meeting."""

    def __init__(self, backend_id: str):
        self.backend_id = backend_id
        super().__init__(
            f"Meeting {backend_id} not found on backend",
            "MEETING_NOT_FOUND",
            {"backend_id": backend_id},
        )


class InvalidPayload(TelehealthError):
    """Inbound webhook payload is malformed."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_PAYLOAD")


class UnknownMeeting(TelehealthError):
    """Inbound webhook references a meeting that cannot be resolved."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"No telehealth meeting matches identifier {identifier}",
            "UNKNOWN_MEETING",
            {"identifier": identifier},
        )


class MeetingRecordNotFound(TelehealthError):
    """No local meeting exists for the appointment."""

    def __init__(self, appointment_id: str):
        self.appointment_id = appointment_id
        super().__init__(
            f"No telehealth meeting for appointment {appointment_id}",
            "MEETING_RECORD_NOT_FOUND",
            {"appointment_id": appointment_id},
        )
