"""Ordered startup and shutdown of the app's components."""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI
from structlog import get_logger
from typing_extensions import TypedDict

from paste_server.config.settings import Settings


logger = get_logger(__name__)


class LifecycleComponent(TypedDict):
    name: str
    startup: Callable[[FastAPI, Settings], Awaitable[None]] | None
    shutdown: Callable[[FastAPI], Awaitable[None]] | None


def _slug(component: LifecycleComponent) -> str:
    return component["name"].lower().replace(" ", "_")


async def run_startup_component(
    component: LifecycleComponent, app: FastAPI, settings: Settings
) -> None:
    """Start one component. Failures are logged and abort startup."""
    startup = component["startup"]
    if startup is None:
        return

    logger.debug("component_starting", component=_slug(component))
    try:
        await startup(app, settings)
    except (OSError, RuntimeError, ValueError) as e:
        logger.error("component_startup_failed", component=_slug(component), error=str(e))
        raise


async def run_shutdown_component(component: LifecycleComponent, app: FastAPI) -> None:
    """Stop one component. Failures are logged so the rest still stop."""
    shutdown = component["shutdown"]
    if shutdown is None:
        return

    logger.debug("component_stopping", component=_slug(component))
    try:
        await shutdown(app)
    except (OSError, RuntimeError) as e:
        logger.error("component_shutdown_failed", component=_slug(component), error=str(e))


async def execute_startup_sequence(
    components: list[LifecycleComponent], app: FastAPI, settings: Settings
) -> None:
    for component in components:
        await run_startup_component(component, app, settings)


async def execute_shutdown_sequence(
    components: list[LifecycleComponent], app: FastAPI
) -> None:
    """Stop components in the reverse of their startup order."""
    for component in reversed(components):
        await run_shutdown_component(component, app)


def log_server_start(settings: Settings) -> None:
    paste = settings.paste
    logger.info(
        "server_start",
        url=settings.server_url,
        storage_backend=settings.storage.backend,
    )
    logger.debug(
        "paste_policy",
        max_body_bytes=paste.max_body_bytes,
        expiry_days=(paste.min_expiry_days, paste.default_expiry_days, paste.max_expiry_days),
    )
