"""API layer for paste-server."""

from paste_server.api.app import create_app, get_app


__all__ = ["create_app", "get_app"]
