"""
Rewrites container-internal backend URLs to their public form.

The telesalud backend usually runs behind an edge proxy and answers with links
built from its own container hostname. Browsers cannot reach those, so every
string in a response that mentions the internal host is rewritten, keeping the
scheme and dropping the port. Percent-encoded links (return URLs carried in a
query string) are rewritten too and stay percent-encoded.
"""

import re
from typing import Any
from urllib.parse import quote, urlsplit

from app.domains.telehealth.domain.exceptions import ConfigurationMissing

# Characters that continue a hostname on either side of a match
_HOST_CHAR = "A-Za-z0-9"
_QUOTED_SEPARATORS = ("%2F", "%3A", "%40")


def _strip_port(url: str) -> str:
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.hostname:
        return url.strip().rstrip("/")
    path = parts.path.rstrip("/")
    return f"{parts.scheme}://{parts.hostname}{path}"


class UrlRewriter:
    """Recursive internal-host -> public-URL rewriting."""

    def __init__(
        self,
        internal_host: str | None,
        public_https_url: str | None = None,
        public_http_url: str | None = None,
    ):
        self._internal_host = (internal_host or "").strip().lower() or None
        https = _strip_port(public_https_url) if public_https_url else None
        http = _strip_port(public_http_url) if public_http_url else None
        # Each scheme falls back to the other public URL with its scheme swapped
        self._public = {
            "https": https or (http and "https://" + http.split("://", 1)[1]),
            "http": http or (https and "http://" + https.split("://", 1)[1]),
        }
        self._pattern = None
        if self._internal_host:
            host = re.escape(self._internal_host)
            self._pattern = re.compile(
                rf"(?:(?P<scheme>https?)://"
                rf"|(?P<qscheme>https?)%3A%2F%2F"
                rf"|(?:(?<![{_HOST_CHAR}.-])|(?<=%2F)|(?<=%3A)|(?<=%40)))"
                rf"{host}(?::\d+|%3A\d+)?(?![{_HOST_CHAR}-]|\.[{_HOST_CHAR}])",
                re.IGNORECASE,
            )

    @property
    def is_complete(self) -> bool:
        """False when there is an internal host but no public URL to replace it with."""
        return self._pattern is None or self._public["https"] is not None

    def rewrite(self, value: Any) -> Any:
        """
        Return a copy of value with every internal URL made public.

        Raises:
            ConfigurationMissing: An internal host is set but no public URL is
        """
        if self._pattern is None:
            return value
        if not self.is_complete:
            raise ConfigurationMissing(
                "TELESALUD_PUBLIC_HTTPS_URL",
                f"No public URL configured to replace internal host '{self._internal_host}'",
            )
        return self._rewrite_value(value)

    def _rewrite_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._pattern.sub(self._replacement, value)
        if isinstance(value, dict):
            return {key: self._rewrite_value(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._rewrite_value(item) for item in value]
        return value

    def _replacement(self, match: re.Match) -> str:
        scheme = (match.group("scheme") or "").lower()
        if scheme:
            return self._public[scheme]
        quoted_scheme = (match.group("qscheme") or "").lower()
        if quoted_scheme:
            return quote(self._public[quoted_scheme], safe="")
        # Schemeless mention, keep it schemeless
        public_host = self._public["https"].split("://", 1)[1]
        preceding = match.string[max(match.start() - 3, 0) : match.start()].upper()
        if preceding in _QUOTED_SEPARATORS:
            return quote(public_host, safe="")
        return public_host
