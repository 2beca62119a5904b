"""paste-server - short-lived pastes guarded by server-issued access keys."""

from ._version import __version__


__all__ = ["__version__"]
