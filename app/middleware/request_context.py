"""Request ID and correlation ID middleware.

Generates or forwards X-Request-ID / X-Correlation-ID, echoes them on the
response and exposes them to log records through context variables, so every
log line of a saga carries the request that started it. Client-provided
values are sanitized (length + character set) to prevent log injection.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Callable

# Safe for logging: alphanumeric, hyphen, underscore; max length to avoid abuse.
ID_MAX_LENGTH = 64
ID_ALLOWED_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1," + str(ID_MAX_LENGTH) + r"}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def _sanitize_id(raw: str | None) -> str | None:
    """Return raw if valid and safe, else None."""
    if not raw or not ID_ALLOWED_PATTERN.match(raw.strip()):
        return None
    return raw.strip()


def _echo_header(send: Callable, header_name: str, value: str) -> Callable:
    async def send_wrapper(message: dict) -> None:
        if message["type"] == "http.response.start":
            headers = list(message.get("headers", []))
            headers.append((header_name.encode(), value.encode()))
            message["headers"] = headers
        await send(message)

    return send_wrapper


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request id on each request and response. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = _sanitize_id(_get_header(scope, header_name)) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)
        try:
            await app(scope, receive, _echo_header(send, header_name, request_id))
        finally:
            request_id_var.reset(token)

    return asgi_app


def CorrelationIDMiddleware(app: Callable, header_name: str = "X-Correlation-ID") -> Callable:
    """Add or forward the correlation id; falls back to the request id. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        correlation_id = (
            _sanitize_id(_get_header(scope, header_name))
            or scope.get("state", {}).get("request_id")
            or str(uuid.uuid4())
        )
        scope.setdefault("state", {})["correlation_id"] = correlation_id
        token = correlation_id_var.set(correlation_id)
        try:
            await app(scope, receive, _echo_header(send, header_name, correlation_id))
        finally:
            correlation_id_var.reset(token)

    return asgi_app


class RequestContextLogFilter(logging.Filter):
    """Attach request_id and correlation_id to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.correlation_id = correlation_id_var.get()
        return True
