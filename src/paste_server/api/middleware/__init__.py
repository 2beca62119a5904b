"""API middleware for paste-server."""

from paste_server.api.middleware.errors import setup_error_handlers
from paste_server.api.middleware.logging import AccessLogMiddleware
from paste_server.api.middleware.request_id import RequestIDMiddleware


__all__ = [
    "AccessLogMiddleware",
    "RequestIDMiddleware",
    "setup_error_handlers",
]
