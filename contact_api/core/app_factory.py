"""Application factory for FastAPI app.

Centralizes app construction (collaborators, middleware, handlers, routers).
The slot store and email sender are created here, once per process, and
injected into the limiter and service; tests pass in-memory fakes instead.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI

from contact_api.adapters.email.base import AbstractEmailSender
from contact_api.adapters.email.factory import create_email_sender
from contact_api.adapters.slot_store.base import AbstractSlotStore
from contact_api.adapters.slot_store.factory import create_slot_store
from contact_api.api.routes import contact_router, health_router
from contact_api.core.config import Settings, settings
from contact_api.core.exception_handlers import setup_exception_handlers
from contact_api.core.logging import configure_logging
from contact_api.core.middleware import cors_middleware, request_id_middleware
from contact_api.core.openapi import apply_openapi_customizations
from contact_api.core.rate_limit import build_rate_limiter
from contact_api.services.contact_service import ContactService

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    slot_store: AbstractSlotStore | None = None,
    email_sender: AbstractEmailSender | None = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Optional settings; defaults to global settings.
        slot_store: Store to use instead of the configured backend.
        email_sender: Sender to use instead of the configured backend.
        clock: Time source for rate limit windows.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.

    Raises:
        ConfigurationAppError: If a configured backend is unknown or incomplete.
    """
    cfg = app_settings or settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log, debug=cfg.app.debug)

    store = slot_store if slot_store is not None else create_slot_store(cfg.store)
    sender = email_sender if email_sender is not None else create_email_sender(cfg.email)

    contact_service = ContactService(
        build_rate_limiter(store, cfg, clock=clock),
        sender,
        from_address=cfg.email.from_address,
        to_address=cfg.email.to_address,
        subject_prefix=cfg.email.subject_prefix,
        rate_limit_enabled=cfg.app.rate_limit_enabled,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "app.startup",
            extra={
                "store_backend": type(store).__name__,
                "email_backend": type(sender).__name__,
                "rate_limit_per_window": cfg.app.rate_limit_per_hour,
                "window_s": cfg.app.rate_limit_window_seconds,
            },
        )
        yield
        await store.close()
        await sender.close()

    app = FastAPI(
        title="Contact Relay API",
        description=(
            "Receives contact form submissions, filters bots with a honeypot "
            "field, rate limits each client per hour using a shared store, and "
            "forwards accepted messages by email."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.slot_store = store
    app.state.email_sender = sender
    app.state.contact_service = contact_service

    # Middleware (last registered runs first)
    app.middleware("http")(cors_middleware)
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(contact_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
