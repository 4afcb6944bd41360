"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses. Every error uses the same envelope:
{"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import DownstreamFailureException, SchoolAdminException
from app.shared.telemetry.tracing import get_trace_id

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "CONFLICT": 409,
    "DEPENDENCY_NOT_FOUND": 404,
    "DOWNSTREAM_FAILURE": 502,
    "AUTHENTICATION_ERROR": 401,
    "BRANCH_ACCESS_DENIED": 403,
}


def _envelope(code: str, message: Any) -> dict[str, Any]:
    return {"error": {"code": code, "message": message}}


def status_for(exc: SchoolAdminException) -> int:
    """HTTP status for a domain exception.

    A store that refused the request (4xx) is the caller's problem (400);
    an unreachable or failing dependency is a bad gateway (502).
    """
    if isinstance(exc, DownstreamFailureException) and exc.rejected_by_store:
        return 400
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _school_admin_exception_handler(
    request: Request, exc: SchoolAdminException
) -> JSONResponse:
    """Return JSON from SchoolAdminException.to_dict() with appropriate status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    else:
        logger.info("%s %s rejected: %s %s", request.method, request.url.path, exc.error_code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 naming the first invalid field."""
    errors = exc.errors()
    message = "Request validation failed"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    return JSONResponse(status_code=400, content=_envelope("VALIDATION_ERROR", message))


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope("HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 in the common envelope."""
    return JSONResponse(
        status_code=429,
        content=_envelope("RATE_LIMITED", f"Rate limit exceeded: {exc.detail}"),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s (trace_id=%s)", exc, get_trace_id())
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(status_code=500, content=_envelope("INTERNAL_ERROR", detail))


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: SchoolAdminException (and
    subclasses), RequestValidationError, RateLimitExceeded,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(SchoolAdminException, _school_admin_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
