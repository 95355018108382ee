"""Telesalud backend configuration value object."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit


@dataclass(frozen=True)
class RemoteBackendConfig:
    """
    Process-wide settings for the telesalud API.

    Built once from Settings at startup. Times are in seconds.
    """

    base_url: str | None = None
    api_token: str | None = None
    notification_url: str | None = None
    days_before_expiration: int = 7
    max_attempts: int = 3
    connect_timeout: float = 5.0
    timeout: float = 10.0
    deadline: float = 30.0
    retry_base_delay: float = 1.0
    retry_max_delay: float = 5.0
    retry_jitter: float = 1.0
    internal_host: str | None = None
    public_https_url: str | None = None
    public_http_url: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url) and bool(self.api_token)

    @property
    def normalized_base_url(self) -> str:
        return (self.base_url or "").strip().rstrip("/")

    @property
    def has_public_url(self) -> bool:
        return bool(self.public_https_url or self.public_http_url)

    @property
    def rewrite_host(self) -> str | None:
        """
        Hostname to rewrite.

        Defaults to the base URL host when a public URL is configured. With
        neither an internal host nor a public URL the base URL is the only
        address known for the backend and responses are returned as sent.
        """
        if self.internal_host:
            return self.internal_host
        if self.base_url and self.has_public_url:
            return urlsplit(self.normalized_base_url).hostname
        return None

    @classmethod
    def from_settings(cls, settings: Any) -> "RemoteBackendConfig":
        return cls(
            base_url=settings.TELESALUD_API_URL,
            api_token=settings.TELESALUD_API_TOKEN,
            notification_url=settings.TELESALUD_NOTIFICATION_URL,
            days_before_expiration=settings.TELESALUD_DAYS_BEFORE_EXPIRATION,
            max_attempts=settings.TELESALUD_MAX_ATTEMPTS,
            connect_timeout=settings.TELESALUD_CONNECT_TIMEOUT,
            timeout=settings.TELESALUD_TIMEOUT,
            deadline=settings.TELESALUD_DEADLINE,
            retry_base_delay=settings.TELESALUD_RETRY_BASE_DELAY,
            retry_max_delay=settings.TELESALUD_RETRY_MAX_DELAY,
            retry_jitter=settings.TELESALUD_RETRY_JITTER,
            internal_host=settings.TELESALUD_INTERNAL_HOST,
            public_https_url=settings.TELESALUD_PUBLIC_HTTPS_URL,
            public_http_url=settings.TELESALUD_PUBLIC_HTTP_URL,
        )
