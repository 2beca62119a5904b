"""Paste storage protocol and the in-memory backend.

The SQLite backend lives in ``paste_server.db.repositories.paste_repo``.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from .models import Paste


__all__ = ["PasteStore", "MemoryPasteStore"]


@runtime_checkable
class PasteStore(Protocol):
    """Protocol for paste storage backends.

    Implementations: PasteRepository (SQLite), MemoryPasteStore (testing and
    ephemeral runs). Lookups ignore pastes whose expiry is not after now.
    """

    async def insert(self, paste: Paste) -> Paste:
        """Store a new paste."""
        ...

    async def get(self, paste_id: str) -> Paste | None:
        """Return the live paste with this id, or None."""
        ...

    async def update(self, paste: Paste, expected_revision: int) -> Paste | None:
        """Replace a paste if its stored revision still equals ``expected_revision``.

        Returns the stored paste with its revision advanced, or None when the
        write was not applied.
        """
        ...

    async def delete(self, paste_id: str, expected_access_key: str) -> bool:
        """Delete a paste if its stored access key still matches. Returns whether it did."""
        ...

    async def cleanup_expired(self) -> int:
        """Remove expired pastes. Returns how many were removed."""
        ...


class MemoryPasteStore:
    """Dict-based paste store. All data is lost when the process exits."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._pastes: dict[str, Paste] = {}
        self._clock = clock or (lambda: datetime.now(UTC))

    def __len__(self) -> int:
        return len(self._pastes)

    async def insert(self, paste: Paste) -> Paste:
        stored = paste.model_copy(update={"revision": 0}, deep=True)
        self._pastes[paste.id] = stored
        return stored.model_copy(deep=True)

    async def get(self, paste_id: str) -> Paste | None:
        paste = self._pastes.get(paste_id)
        if paste is None or paste.is_expired(self._clock()):
            return None
        return paste.model_copy(deep=True)

    async def update(self, paste: Paste, expected_revision: int) -> Paste | None:
        current = self._pastes.get(paste.id)
        if current is None or current.revision != expected_revision:
            return None
        stored = paste.model_copy(update={"revision": expected_revision + 1}, deep=True)
        self._pastes[paste.id] = stored
        return stored.model_copy(deep=True)

    async def delete(self, paste_id: str, expected_access_key: str) -> bool:
        current = self._pastes.get(paste_id)
        if current is None or current.access_key != expected_access_key:
            return False
        del self._pastes[paste_id]
        return True

    async def cleanup_expired(self) -> int:
        now = self._clock()
        expired = [key for key, paste in self._pastes.items() if paste.is_expired(now)]
        for key in expired:
            del self._pastes[key]
        return len(expired)
