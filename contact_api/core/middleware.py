"""HTTP middleware for request correlation and CORS.

- ``request_id_middleware`` accepts an incoming X-Request-ID header or
  generates a UUID, keeps it in contextvars for log correlation, and echoes it
  with the request duration on the response.
- ``cors_middleware`` answers browser preflights and stamps the fixed CORS
  headers of the contact form's site on every response.

Usage:
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(cors_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from contact_api.core.config import settings
from contact_api.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """HTTP middleware for request ID generation and propagation.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The response from the next handler with request_id and
            duration headers added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    # Read by the fallback 500 handler, which runs after the finally below.
    request.state.request_id = request_id
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


def build_cors_headers(allowed_origin: str) -> dict[str, str]:
    """Fixed CORS headers attached to every response.

    Args:
        allowed_origin: Value for Access-Control-Allow-Origin.

    Returns:
        dict[str, str]: Header name to value.
    """

    return {
        "Access-Control-Allow-Origin": allowed_origin,
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": "POST,OPTIONS",
        "Vary": "Origin",
    }


async def cors_middleware(request: Request, call_next) -> Response:
    """Answer preflight requests and add CORS headers to every response.

    OPTIONS requests short-circuit with 204 and an empty body, whatever the
    path. Error responses carry the headers too, so browsers can read them.
    """

    cfg = getattr(request.app.state, "settings", settings)
    headers = build_cors_headers(cfg.app.allowed_origin)

    if request.method == "OPTIONS":
        return Response(status_code=204, headers=headers)

    response: Response = await call_next(request)
    for name, value in headers.items():
        response.headers[name] = value
    return response
