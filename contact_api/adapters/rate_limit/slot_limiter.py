"""Fixed-window rate limiter built on expiring slot keys.

Each (identity, window) pair owns ``limit`` slots. A request is allowed when it
manages to create one of the slot keys with the store's atomic
create-if-absent primitive. The store arbitrates races per key, so the number
of successful acquisitions can never exceed ``limit``, across any number of
processes or hosts sharing the store. Keys carry an expiry a little past the
window end and are reclaimed by the store; nothing is ever updated or deleted
here.

Bursts straddling a window boundary may see up to ``2 * limit`` successes,
since each window has its own slots.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

from contact_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from contact_api.adapters.slot_store.base import AbstractSlotStore
from contact_api.core.logging import hash_for_log

logger = logging.getLogger(__name__)

DEFAULT_TTL_SLACK_SECONDS = 100


def build_slot_key(
    identity: str,
    window_seconds: int,
    window_index: int,
    slot: int,
    *,
    namespace: str,
) -> str:
    """Build the store key for one slot.

    The window length is part of the key so limiters configured with
    different windows never share slots. ``#`` in the identity is escaped so
    untrusted identities cannot forge another key's layout.
    """

    safe_identity = identity.replace("%", "%25").replace("#", "%23")
    return f"{namespace}#id#{safe_identity}#win#{window_seconds}#{window_index}#slot#{slot}"


class SlotRateLimiter(AbstractRateLimiter):
    """Distributed fixed-window limiter claiming slots in a shared store."""

    def __init__(
        self,
        store: AbstractSlotStore,
        *,
        limit: int,
        window_seconds: int = 3600,
        ttl_slack_seconds: int = DEFAULT_TTL_SLACK_SECONDS,
        namespace: str = "contact-rate",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Shared slot store; the only state the limiter uses.
            limit: Default max acquisitions per window for ``acquire``.
            window_seconds: Default window length for ``acquire``.
            ttl_slack_seconds: Lifetime added to slot keys past the window
                length to absorb clock skew between hosts and the store.
            namespace: Key prefix isolating this limiter's keys.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If limit, window_seconds or ttl_slack_seconds are invalid.
        """
        if limit < 0:
            raise ValueError("limit must be >= 0")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")
        if ttl_slack_seconds < 0:
            raise ValueError("ttl_slack_seconds must be >= 0")

        self._store = store
        self._limit = limit
        self._window_seconds = window_seconds
        self._ttl_slack_seconds = ttl_slack_seconds
        self._namespace = namespace
        self._clock = clock

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    async def _claim_slot(self, identity: str, limit: int, window_seconds: int, now: float) -> int | None:
        """Claim the first free slot of the window containing ``now``.

        Returns:
            The claimed slot number, or None when every slot is taken.

        Raises:
            SlotStoreError: Propagated unchanged from the store.
        """
        # Window index comes from this call's clock reading, never from cached state.
        window_index = int(now // window_seconds)
        expires_at = int(now) + window_seconds + self._ttl_slack_seconds

        for slot in range(1, limit + 1):
            key = build_slot_key(
                identity,
                window_seconds,
                window_index,
                slot,
                namespace=self._namespace,
            )
            if await self._store.create_if_absent(key, expires_at):
                return slot
        return None

    @staticmethod
    def _validate(identity: str, limit: int, window_seconds: int) -> None:
        if not identity:
            raise ValueError("identity must be a non-empty string")
        if limit < 0:
            raise ValueError("limit must be >= 0")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

    async def try_acquire(self, identity: str, limit: int, window_seconds: int) -> bool:
        """Reserve one slot for ``identity`` in the current window.

        Slots ``1..limit`` are probed in ascending order; the first one the
        store lets us create is ours. A limit of 0 never touches the store.

        Args:
            identity: Caller identifier (e.g., client IP address).
            limit: Max acquisitions per window.
            window_seconds: Window length in seconds.

        Returns:
            True if a slot was durably reserved, False if all are taken.

        Raises:
            ValueError: If identity is empty or limit/window are invalid.
            SlotStoreError: If the store fails; the outcome is then unknown.
        """
        self._validate(identity, limit, window_seconds)
        now = self._clock()
        slot = await self._claim_slot(identity, limit, window_seconds, now)
        return slot is not None

    async def acquire(self, identity: str) -> RateLimitResult:
        """Reserve one slot using the configured limit and window.

        Args:
            identity: Caller identifier (e.g., client IP address).

        Returns:
            RateLimitResult with the decision and window metadata. On success
            ``remaining`` is an upper bound: concurrent callers may have
            claimed higher-numbered slots meanwhile.

        Raises:
            ValueError: If identity is empty.
            SlotStoreError: If the store fails.
        """
        self._validate(identity, self._limit, self._window_seconds)
        now = self._clock()
        slot = await self._claim_slot(identity, self._limit, self._window_seconds, now)

        window_start = int(now // self._window_seconds) * self._window_seconds
        reset_at = window_start + self._window_seconds
        identity_hash = hash_for_log(identity)

        if slot is not None:
            logger.info(
                "rate_limit.allowed",
                extra={
                    "identity_hash": identity_hash,
                    "slot": slot,
                    "limit": self._limit,
                    "window_s": self._window_seconds,
                },
            )
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=max(0, self._limit - slot),
                reset_at=reset_at,
                retry_after_seconds=None,
            )

        retry_after = max(0, int(math.ceil(reset_at - now)))
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "identity_hash": identity_hash,
                "limit": self._limit,
                "window_s": self._window_seconds,
                "retry_after_s": retry_after,
            },
        )
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=0,
            reset_at=reset_at,
            retry_after_seconds=retry_after,
        )
