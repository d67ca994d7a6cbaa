"""Rate limiter interfaces.

The service layer depends on this abstraction (not the concrete implementation)
so the limiting strategy and its storage can change without touching callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit acquire operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    async def try_acquire(self, identity: str, limit: int, window_seconds: int) -> bool:
        """Reserve one unit of quota for ``identity`` in the current window.

        Args:
            identity: Caller identifier (e.g., client IP address).
            limit: Max acquisitions per window.
            window_seconds: Window length in seconds.

        Returns:
            True if a unit was reserved, False if the window is exhausted.
        """
        raise NotImplementedError

    @abstractmethod
    async def acquire(self, identity: str) -> RateLimitResult:
        """Reserve one unit using the limiter's configured limit and window.

        Args:
            identity: Caller identifier (e.g., client IP address).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
