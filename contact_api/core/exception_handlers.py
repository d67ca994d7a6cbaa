"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- ValidationAppError → 400 with code, message and details
- ConfigurationAppError / InfrastructureAppError → opaque 500; the cause is
  logged, never returned
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from contact_api.core.config import settings
from contact_api.core.errors import (
    AppError,
    ConfigurationAppError,
    InfrastructureAppError,
)
from contact_api.core.logging import get_request_id
from contact_api.core.middleware import build_cors_headers

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = {
    "code": "internal_server_error",
    "message": "An unexpected error occurred. Please try again later.",
}


def _server_error_response(request_id: str | None) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": {**GENERIC_SERVER_ERROR, "request_id": request_id}},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Client faults keep their code, message and details. Configuration and
    infrastructure faults are logged in full and reported to the client as a
    generic server error.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    if isinstance(exc, (ConfigurationAppError, InfrastructureAppError)):
        logger.error(
            "server_fault",
            extra={
                "error_code": exc.code,
                "error_message": exc.message,
                "error_details": exc.details or {},
                "cause_type": type(exc.__cause__).__name__ if exc.__cause__ else None,
                "request_path": request.url.path,
                "request_id": get_request_id(),
            },
        )
        return _server_error_response(get_request_id())

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": 400,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        }
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }

    # Include details only if present (optional structured context)
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=400,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Runs outside the HTTP middleware stack, after the request id context has
    been cleared. The id is read back from ``request.state`` and echoed in the
    header, and CORS headers are added here so browsers can read the failure.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    request_id = get_request_id() or getattr(request.state, "request_id", None)
    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": request_id,
        },
    )

    response = _server_error_response(request_id)
    cfg = getattr(request.app.state, "settings", settings)
    response.headers.update(build_cors_headers(cfg.app.allowed_origin))
    if request_id:
        response.headers[cfg.log.request_id_header] = request_id
    return response


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
