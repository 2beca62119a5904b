"""CLI commands for paste-server."""

from .prune import prune
from .serve import start


__all__ = ["prune", "start"]
