"""Database package for SQLite persistence."""

from paste_server.db.engine import close_db, get_engine, get_session, init_db
from paste_server.db.models import PasteRecord


__all__ = [
    "PasteRecord",
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
]
