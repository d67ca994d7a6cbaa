"""Redis slot store.

Uses ``SET key 1 NX EXAT <expires_at>``: Redis executes the command
atomically, so exactly one of several racing callers creates a given key,
and the key is evicted by Redis itself once the expiry passes.
"""

from __future__ import annotations

import logging
from typing import Any

import redis
import redis.asyncio as aioredis

from contact_api.adapters.slot_store.base import AbstractSlotStore
from contact_api.core.errors import SlotStoreError

logger = logging.getLogger(__name__)


class RedisSlotStore(AbstractSlotStore):
    """Slot store shared by every instance pointing at the same Redis."""

    def __init__(
        self,
        *,
        redis_client: Any | None = None,
        redis_url: str | None = None,
        socket_timeout_seconds: float = 2.0,
    ) -> None:
        """Initialize the Redis store.

        Args:
            redis_client: Optional pre-built ``redis.asyncio.Redis`` client.
            redis_url: Connection URL used when no client is given.
            socket_timeout_seconds: Per-call socket timeout.

        Raises:
            ValueError: If neither a client nor a URL is provided.
        """
        if redis_client is None and not redis_url:
            raise ValueError("redis_client or redis_url is required")

        if redis_client is None:
            redis_client = aioredis.from_url(
                redis_url,
                socket_timeout=socket_timeout_seconds,
                socket_connect_timeout=socket_timeout_seconds,
            )
        self._redis = redis_client

    async def create_if_absent(self, key: str, expires_at: int) -> bool:
        try:
            created = await self._redis.set(key, b"1", nx=True, exat=int(expires_at))
        except redis.RedisError as exc:
            logger.error(
                "slot_store.error",
                extra={
                    "backend": "redis",
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise SlotStoreError(
                code="slot_store_unavailable",
                message="Rate limit store request failed",
                details={"backend": "redis"},
            ) from exc

        # SET ... NX replies nil when the key already exists
        return bool(created)

    async def close(self) -> None:
        await self._redis.aclose()
