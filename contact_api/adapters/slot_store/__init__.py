"""Slot store adapters.

A slot store is the only shared state behind the rate limiter: a key-value
store whose single write primitive is an atomic "create key if absent" with a
per-key expiry. Backends are swappable without touching the limiter.
"""

from contact_api.adapters.slot_store.base import AbstractSlotStore
from contact_api.adapters.slot_store.factory import create_slot_store
from contact_api.adapters.slot_store.in_memory import InMemorySlotStore
from contact_api.adapters.slot_store.redis_store import RedisSlotStore

__all__ = [
    "AbstractSlotStore",
    "InMemorySlotStore",
    "RedisSlotStore",
    "create_slot_store",
]
