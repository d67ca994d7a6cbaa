"""Rate limiting adapters.

This package provides the limiter abstraction the service layer depends on
and the slot-claiming implementation that enforces a per-client quota using
only create-if-absent writes against a shared slot store.
"""

from contact_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from contact_api.adapters.rate_limit.slot_limiter import SlotRateLimiter, build_slot_key

__all__ = [
    "AbstractRateLimiter",
    "RateLimitResult",
    "SlotRateLimiter",
    "build_slot_key",
]
