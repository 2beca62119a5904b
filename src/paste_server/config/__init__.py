"""Configuration module for paste-server."""

from .paste import PasteSettings
from .server import ServerSettings
from .settings import (
    ConfigurationError,
    ConfigurationManager,
    Settings,
    config_manager,
    get_settings,
)
from .storage import StorageSettings


__all__ = [
    "Settings",
    "get_settings",
    "ConfigurationError",
    "ConfigurationManager",
    "config_manager",
    "PasteSettings",
    "ServerSettings",
    "StorageSettings",
]
