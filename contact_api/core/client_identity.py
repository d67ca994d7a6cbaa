"""Client identity extraction for rate limiting."""

from __future__ import annotations

from fastapi import Request

FALLBACK_IDENTITY = "0.0.0.0"


def client_identity(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Resolve the identity a request is rate limited under.

    Args:
        request: FastAPI request.
        trust_forwarded_for: Use the first X-Forwarded-For hop. Only safe
            behind a proxy that overwrites the header.

    Returns:
        str: Client IP address, or "0.0.0.0" when none is available.
    """

    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host
    return FALLBACK_IDENTITY
