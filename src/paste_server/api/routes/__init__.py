"""API routes for paste-server."""

from paste_server.api.routes.health import router as health_router
from paste_server.api.routes.pastes import router as pastes_router


__all__ = [
    "health_router",
    "pastes_router",
]
