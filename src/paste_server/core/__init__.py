"""Core utilities shared across paste-server."""

from paste_server.core.logging import setup_logging
from paste_server.core.request_context import RequestContext


__all__ = ["RequestContext", "setup_logging"]
