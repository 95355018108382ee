"""
Meeting Link Provider - Domain Service.

Builds join links for the standalone providers (Jitsi, Google Meet, Doxy.me,
Doximity or a custom URL template). No network I/O and no persistence: the
output depends only on the configuration and one random slug.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Callable

from ..exceptions import ConfigurationMissing
from ..value_objects.link_provider import LinkProvider

logger = logging.getLogger(__name__)

DEFAULT_JITSI_BASE_URL = "https://meet.jit.si"
GOOGLE_MEET_BASE_URL = "https://meet.google.com"
SLUG_PLACEHOLDER = "{{slug}}"
SLUG_BYTES = 5  # 10 hex characters


def generate_slug() -> str:
    """10 lowercase hex characters from a CSPRNG."""
    return secrets.token_hex(SLUG_BYTES)


@dataclass(frozen=True)
class LinkProviderConfig:
    """Standalone provider settings."""

    provider: str = LinkProvider.JITSI.value
    jitsi_base_url: str = DEFAULT_JITSI_BASE_URL
    doxy_room_url: str | None = None
    doximity_room_url: str | None = None
    template_url: str | None = None

    @classmethod
    def from_settings(cls, settings: Any) -> "LinkProviderConfig":
        return cls(
            provider=settings.TELEHEALTH_PROVIDER,
            jitsi_base_url=settings.JITSI_BASE_URL or DEFAULT_JITSI_BASE_URL,
            doxy_room_url=settings.DOXY_ROOM_URL,
            doximity_room_url=settings.DOXIMITY_ROOM_URL,
            template_url=settings.TELEHEALTH_TEMPLATE_URL,
        )


@dataclass(frozen=True)
class MeetingLinks:
    """Join links for both roles. Simple providers share one URL."""

    provider: LinkProvider
    provider_url: str
    patient_url: str
    slug: str | None = None


class MeetingLinkProvider:
    """Generates meeting URLs for the configured standalone provider."""

    def __init__(
        self,
        config: LinkProviderConfig,
        slug_factory: Callable[[], str] = generate_slug,
    ):
        self._config = config
        self._slug_factory = slug_factory

    def generate(self, appointment_id: str, provider: LinkProvider | str | None = None) -> MeetingLinks:
        """
        Generate links for an appointment.

        Args:
            appointment_id: Host appointment id, embedded in Jitsi room names
            provider: Provider override. Defaults to the configured provider.

        Returns:
            MeetingLinks for the chosen provider

        Raises:
            ConfigurationMissing: Unknown provider or missing static room URL
        """
        kind = self._resolve_provider(provider)

        if kind is LinkProvider.DOXY_ME:
            return self._static_room(kind, self._config.doxy_room_url, "DOXY_ROOM_URL")
        if kind is LinkProvider.DOXIMITY:
            return self._static_room(kind, self._config.doximity_room_url, "DOXIMITY_ROOM_URL")

        slug = self._slug_factory()

        if kind is LinkProvider.GOOGLE_MEET:
            url = f"{GOOGLE_MEET_BASE_URL}/{self._meet_code(slug)}"
            return MeetingLinks(kind, url, url, slug)

        if kind is LinkProvider.TEMPLATE:
            template = (self._config.template_url or "").strip()
            if template:
                if SLUG_PLACEHOLDER in template:
                    url = template.replace(SLUG_PLACEHOLDER, slug)
                else:
                    url = f"{template.rstrip('/')}/{slug}"
                return MeetingLinks(kind, url, url, slug)
            logger.warning("TELEHEALTH_TEMPLATE_URL not set, falling back to Jitsi")
            kind = LinkProvider.JITSI

        base_url = (self._config.jitsi_base_url or DEFAULT_JITSI_BASE_URL).rstrip("/")
        url = f"{base_url}/EMRTelevisit-{appointment_id}-{slug}"
        return MeetingLinks(LinkProvider.JITSI, url, url, slug)

    def _resolve_provider(self, provider: LinkProvider | str | None) -> LinkProvider:
        raw = provider if provider is not None else self._config.provider
        if isinstance(raw, LinkProvider):
            kind = raw
        else:
            try:
                kind = LinkProvider((raw or "").strip().lower())
            except ValueError:
                raise ConfigurationMissing(
                    "TELEHEALTH_PROVIDER", f"Unknown telehealth provider '{raw}'"
                ) from None
        if not kind.is_local:
            raise ConfigurationMissing(
                "TELEHEALTH_PROVIDER", "The telesalud backend is not a standalone link provider"
            )
        return kind

    @staticmethod
    def _static_room(kind: LinkProvider, url: str | None, setting: str) -> MeetingLinks:
        if not url or not url.strip():
            raise ConfigurationMissing(setting, f"{kind.display_name} room URL is not configured")
        return MeetingLinks(kind, url.strip(), url.strip())

    @staticmethod
    def _meet_code(slug: str) -> str:
        """xxx-xxxx-xxx from a 10 character slug."""
        return f"{slug[0:3]}-{slug[3:7]}-{slug[7:10]}"
