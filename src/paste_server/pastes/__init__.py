"""Paste lifecycle: request decoding, construction, editing and access checks."""

from .decoder import RequestDecoder
from .guard import AuthorizationGuard
from .lifecycle import PasteLifecycleManager
from .models import (
    Paste,
    PasteCreate,
    PasteCreatedResponse,
    PasteDelete,
    PasteUpdate,
    PasteUpdatedResponse,
    PasteView,
    format_timestamp,
)
from .service import PasteService
from .store import MemoryPasteStore, PasteStore


__all__ = [
    "AuthorizationGuard",
    "MemoryPasteStore",
    "Paste",
    "PasteCreate",
    "PasteCreatedResponse",
    "PasteDelete",
    "PasteLifecycleManager",
    "PasteService",
    "PasteStore",
    "PasteUpdate",
    "PasteUpdatedResponse",
    "PasteView",
    "RequestDecoder",
    "format_timestamp",
]
