"""In-memory slot store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Expired keys are treated as absent and swept on every write, so the map
  only holds slots of windows that are still live.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from contact_api.adapters.slot_store.base import AbstractSlotStore


class InMemorySlotStore(AbstractSlotStore):
    """Slot store backed by a dict of key -> expiry timestamp."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            clock: Time source returning UNIX time in seconds. Tests inject a
                manual clock to simulate expiry.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._expiry_by_key: dict[str, int] = {}

    def _evict_expired_locked(self, now: float) -> int:
        expired = [k for k, exp in self._expiry_by_key.items() if exp <= now]
        for key in expired:
            del self._expiry_by_key[key]
        return len(expired)

    async def create_if_absent(self, key: str, expires_at: int) -> bool:
        now = self._clock()
        with self._lock:
            self._evict_expired_locked(now)
            if key in self._expiry_by_key:
                return False
            self._expiry_by_key[key] = int(expires_at)
            return True

    def contains(self, key: str) -> bool:
        """Return whether ``key`` is present and not yet expired."""

        with self._lock:
            expires_at = self._expiry_by_key.get(key)
            return expires_at is not None and expires_at > self._clock()

    def purge_expired(self) -> int:
        """Drop every expired key.

        Returns:
            Number of keys removed.
        """

        with self._lock:
            return self._evict_expired_locked(self._clock())

    def stored_key_count(self) -> int:
        """Number of keys held, expired-but-unswept ones included."""

        with self._lock:
            return len(self._expiry_by_key)

    def keys(self) -> list[str]:
        """Snapshot of live keys (diagnostics and tests)."""

        now = self._clock()
        with self._lock:
            return [k for k, exp in self._expiry_by_key.items() if exp > now]

    def __len__(self) -> int:
        return len(self.keys())
