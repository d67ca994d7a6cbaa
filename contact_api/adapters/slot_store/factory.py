"""Factory for creating slot store instances."""

from contact_api.adapters.slot_store.base import AbstractSlotStore
from contact_api.adapters.slot_store.in_memory import InMemorySlotStore
from contact_api.adapters.slot_store.redis_store import RedisSlotStore
from contact_api.core.config import StoreSettings, settings
from contact_api.core.errors import ConfigurationAppError


def create_slot_store(store_settings: StoreSettings | None = None) -> AbstractSlotStore:
    """Instantiate the slot store selected by configuration.

    Args:
        store_settings: Optional store settings; defaults to global settings.

    Returns:
        AbstractSlotStore: Configured store.

    Raises:
        ConfigurationAppError: If the backend is unknown or incompletely configured.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "memory":
        return InMemorySlotStore()

    if backend == "redis":
        if not cfg.redis_url:
            raise ConfigurationAppError(
                code="store_missing_url",
                message="Redis slot store requires STORE_REDIS_URL",
                details={"backend": backend, "setting": "STORE_REDIS_URL"},
            )
        return RedisSlotStore(
            redis_url=cfg.redis_url,
            socket_timeout_seconds=cfg.socket_timeout_seconds,
        )

    raise ConfigurationAppError(
        code="store_unknown_backend",
        message=f"Unknown slot store backend: '{backend}'. Supported backends: memory, redis",
        details={"backend": backend, "setting": "STORE_BACKEND"},
    )
