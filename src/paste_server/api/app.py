"""Builds the paste-server ASGI app."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from structlog import get_logger

from paste_server import __version__
from paste_server.api.lifecycle import (
    LifecycleComponent,
    execute_shutdown_sequence,
    execute_startup_sequence,
    log_server_start,
)
from paste_server.api.middleware.errors import setup_error_handlers
from paste_server.api.middleware.logging import AccessLogMiddleware
from paste_server.api.middleware.request_id import RequestIDMiddleware
from paste_server.api.routes.health import router as health_router
from paste_server.api.routes.pastes import router as pastes_router
from paste_server.api.startup import (
    initialize_paste_service_startup,
    initialize_storage_startup,
    shutdown_storage,
)
from paste_server.config.settings import Settings, get_settings
from paste_server.core.logging import setup_logging
from paste_server.pastes.store import PasteStore


logger = get_logger(__name__)


# Startup runs top to bottom, shutdown bottom to top
LIFECYCLE_COMPONENTS: list[LifecycleComponent] = [
    {
        "name": "Paste Storage",
        "startup": initialize_storage_startup,
        "shutdown": shutdown_storage,
    },
    {
        "name": "Paste Service",
        "startup": initialize_paste_service_startup,
        "shutdown": None,
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open storage and the service on startup, release them on shutdown."""
    settings: Settings = app.state.settings

    log_server_start(settings)
    await execute_startup_sequence(LIFECYCLE_COMPONENTS, app, settings)

    yield

    logger.debug("server_stop")
    await execute_shutdown_sequence(LIFECYCLE_COMPONENTS, app)


def create_app(
    settings: Settings | None = None,
    store: PasteStore | None = None,
) -> FastAPI:
    """Assemble the app with its middleware, error handlers and routes.

    ``settings`` defaults to ``get_settings()``. A ``store`` passed here is used
    as is; otherwise one is opened from the storage settings during startup.
    """
    if settings is None:
        settings = get_settings()

    # Reload mode re-imports the app in a fresh process with no logging set up
    if not structlog.is_configured():
        setup_logging(
            json_logs=settings.server.json_logs,
            log_level_name=settings.server.log_level,
            log_file=settings.server.log_file,
        )

    app = FastAPI(
        title="paste-server",
        description="Anonymous paste service with expiring, access-key protected pastes",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.paste_store = store

    setup_error_handlers(app)

    # Middleware runs in reverse order of registration
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health first so /health is not captured by /{paste_id}
    app.include_router(health_router, tags=["health"])
    app.include_router(pastes_router, tags=["pastes"])

    return app


def get_app() -> FastAPI:
    """Zero-argument factory for uvicorn."""
    return create_app()
