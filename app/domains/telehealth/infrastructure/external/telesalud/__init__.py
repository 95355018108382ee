"""Telesalud videoconsultation API integration."""

from .client import TelesaludClient, backoff_wait
from .config import RemoteBackendConfig
from .url_rewriter import UrlRewriter

__all__ = [
    "RemoteBackendConfig",
    "TelesaludClient",
    "UrlRewriter",
    "backoff_wait",
]
