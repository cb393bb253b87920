"""FastAPI application wired with the session middleware."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from .config import SessionSettings, get_settings
from .middleware import SessionMiddleware
from .routes import health, session_ep
from .storage import SessionStorage, lookup_storage, storage_from_settings

logger = logging.getLogger(__name__)


def create_app(
    *,
    storage: SessionStorage | str | None = None,
    settings: SessionSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        storage: Session storage (default: built from settings).
        settings: Settings to use instead of the environment.
    """
    s = settings or get_settings()
    backend = lookup_storage(storage) if storage is not None else storage_from_settings(s)
    logger.info("Sessions: using %s", type(backend).__name__)

    app = FastAPI(title="ASGI Sessions")
    app.state.session_storage = backend
    app.add_middleware(SessionMiddleware, storage=backend, **s.cookie_options)

    app.include_router(session_ep.router)
    app.include_router(health.router)

    return app
