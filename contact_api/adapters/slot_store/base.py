"""Slot store interface.

The rate limiter depends on this abstraction only, so a shared store
(Redis) and the in-process store used in development and tests are
interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractSlotStore(ABC):
    """Key-value store offering linearizable create-if-absent with expiry."""

    @abstractmethod
    async def create_if_absent(self, key: str, expires_at: int) -> bool:
        """Atomically create ``key`` unless it already exists.

        Concurrent callers racing on the same key must see exactly one
        ``True``. The key is reclaimed by the store at or after ``expires_at``.

        Args:
            key: Slot key to create.
            expires_at: UNIX epoch seconds after which the key may vanish.

        Returns:
            True if the key was created, False if it already existed.

        Raises:
            SlotStoreError: On any other store failure (network, auth, ...).
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections held by the store (no-op by default)."""
        return None
