"""
Request logging middleware for the telehealth API.

Logs method, path, status and duration of every request and tags it with a
request id so webhook deliveries can be followed across log lines.
"""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP middleware for request/response logging.

    Notification polling is frequent, so it is logged at DEBUG unless it fails.
    """

    EXCLUDE_PATHS: tuple[str, ...] = ("/health", "/favicon.ico")
    QUIET_SUFFIXES: tuple[str, ...] = ("/telehealth/notifications",)

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(exclude) for exclude in self.EXCLUDE_PATHS)

    def _is_quiet(self, request: Request) -> bool:
        return request.method == "GET" and request.url.path.endswith(self.QUIET_SUFFIXES)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id

        if self._is_excluded(request.url.path):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{request_id}] {request.method} {request.url.path} failed in {duration_ms:.2f}ms: {e}")
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        elif self._is_quiet(request):
            level = logging.DEBUG
        else:
            level = logging.INFO

        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} from {self._get_client_ip(request)} "
            f"-> {response.status_code} in {duration_ms:.2f}ms",
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """First address of X-Forwarded-For when behind a proxy."""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
