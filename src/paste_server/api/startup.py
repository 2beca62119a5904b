"""Startup and shutdown steps for the paste service."""

from fastapi import FastAPI
from structlog import get_logger

from paste_server.config.settings import Settings
from paste_server.db import close_db, init_db
from paste_server.db.repositories import PasteRepository
from paste_server.pastes import (
    AuthorizationGuard,
    MemoryPasteStore,
    PasteLifecycleManager,
    PasteService,
    RequestDecoder,
)


logger = get_logger(__name__)


async def initialize_storage_startup(app: FastAPI, settings: Settings) -> None:
    """Open the configured paste store unless one was injected.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    if getattr(app.state, "paste_store", None) is not None:
        logger.debug("paste_store_injected")
        return

    if settings.storage.backend == "memory":
        app.state.paste_store = MemoryPasteStore()
        logger.debug("memory_store_initialized")
        return

    await init_db(settings.storage.database_path)
    app.state.paste_store = PasteRepository()
    app.state.owns_database = True
    logger.debug("database_initialized", path=str(settings.storage.database_path))


async def shutdown_storage(app: FastAPI) -> None:
    """Close the database if this app opened it."""
    if getattr(app.state, "owns_database", False):
        await close_db()
        app.state.owns_database = False
        logger.debug("database_closed")


async def initialize_paste_service_startup(app: FastAPI, settings: Settings) -> None:
    """Build the paste service and request decoder from settings.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    app.state.paste_service = PasteService(
        store=app.state.paste_store,
        manager=PasteLifecycleManager(settings.paste),
        guard=AuthorizationGuard(),
    )
    app.state.request_decoder = RequestDecoder(settings.paste.max_body_bytes)
