"""Repository layer for database operations."""

from paste_server.db.repositories.paste_repo import PasteRepository


__all__ = ["PasteRepository"]
