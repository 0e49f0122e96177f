"""
Pure ASGI middleware: request ids and access logging, security headers.
"""

import logging
import re
import time
from typing import List, Tuple

from employee_portal.core.logging_config import generate_request_id, request_id_var

_REQUEST_ID_HEADER = b"x-request-id"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Probes are polled constantly; logging them drowns real traffic
_QUIET_PATHS = frozenset({"/health", "/metrics"})

Headers = List[Tuple[bytes, bytes]]


def _incoming_request_id(headers: Headers) -> str:
    """Reuse a well-formed X-Request-ID from a proxy, otherwise mint one."""
    for name, value in headers:
        if name.lower() == _REQUEST_ID_HEADER:
            candidate = value.decode("latin-1")
            if _VALID_REQUEST_ID.match(candidate):
                return candidate
            break
    return generate_request_id()


class RequestLoggingMiddleware:
    """
    One access log line per request, with status and duration.

    The request id is published through request_id_var for the whole request
    so every log record it produces carries it, and is echoed back in the
    X-Request-ID response header.
    """

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger("employee_portal.http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope.get("headers", []))
        scope.setdefault("state", {})["request_id"] = request_id
        context_token = request_id_var.set(request_id)
        started = time.perf_counter()
        status_code = 500

        async def send_with_request_id(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                message["headers"] = list(message.get("headers", [])) + [
                    (_REQUEST_ID_HEADER, request_id.encode("latin-1"))
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            path = scope.get("path", "")
            if path not in _QUIET_PATHS:
                elapsed_ms = (time.perf_counter() - started) * 1000
                self.logger.log(
                    logging.WARNING if status_code >= 400 else logging.INFO,
                    f"{scope.get('method', '-')} {path} -> {status_code} ({elapsed_ms:.1f}ms)",
                    extra={"status": status_code, "duration_ms": round(elapsed_ms, 1)},
                )
            request_id_var.reset(context_token)


class SecurityHeadersMiddleware:
    """
    Add hardening headers to every response, and no-store on API responses
    since they carry tokens and employee data.
    """

    BASE_HEADERS: Headers = [
        (b"x-content-type-options", b"nosniff"),
        (b"x-frame-options", b"DENY"),
        (b"referrer-policy", b"no-referrer"),
    ]

    def __init__(self, app, api_prefix: str = "/api"):
        self.app = app
        self.api_prefix = api_prefix.rstrip("/")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        extra: Headers = list(self.BASE_HEADERS)
        if scope.get("path", "").startswith(self.api_prefix + "/"):
            extra.append((b"cache-control", b"no-store"))

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                present = {name.lower() for name, _ in message.get("headers", [])}
                message["headers"] = list(message.get("headers", [])) + [
                    (name, value) for name, value in extra if name not in present
                ]
            await send(message)

        await self.app(scope, receive, send_with_headers)
