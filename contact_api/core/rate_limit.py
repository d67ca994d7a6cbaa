"""Rate limiting wiring for the HTTP layer.

This module builds the limiter from settings and translates its decisions
into HTTP response headers.

Design goals:
- Minimal coupling: the service depends on the abstract limiter only.
- Swap-friendly: the slot store is injected, so Redis in production and the
  in-memory store in tests run the same limiter code.
"""

from __future__ import annotations

import time
from typing import Callable

from contact_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from contact_api.adapters.rate_limit.slot_limiter import SlotRateLimiter
from contact_api.adapters.slot_store.base import AbstractSlotStore
from contact_api.core.config import Settings, settings


def build_rate_limiter(
    store: AbstractSlotStore,
    app_settings: Settings | None = None,
    *,
    clock: Callable[[], float] = time.time,
) -> AbstractRateLimiter:
    """Create the per-client limiter backed by ``store``.

    Args:
        store: Shared slot store.
        app_settings: Optional settings; defaults to global settings.
        clock: Time source returning UNIX time in seconds.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    cfg = app_settings or settings
    return SlotRateLimiter(
        store,
        limit=cfg.app.rate_limit_per_hour,
        window_seconds=cfg.app.rate_limit_window_seconds,
        ttl_slack_seconds=cfg.app.rate_limit_ttl_slack_seconds,
        namespace=cfg.store.namespace,
        clock=clock,
    )


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Build Retry-After and X-RateLimit-* headers for a limiter decision.

    Args:
        result: Decision returned by the limiter.

    Returns:
        dict[str, str]: Headers to attach to the response.
    """

    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }
    if result.retry_after_seconds is not None:
        headers["Retry-After"] = str(result.retry_after_seconds)
    return headers
