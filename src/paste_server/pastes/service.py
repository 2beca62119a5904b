"""Paste operations composed from the decoder output, lifecycle, guard and store."""

import structlog

from paste_server.exceptions import (
    ConflictError,
    PasteNotFoundError,
    PersistenceError,
)

from .guard import AuthorizationGuard
from .lifecycle import PasteLifecycleManager
from .models import Paste, PasteCreate, PasteDelete, PasteUpdate
from .store import PasteStore


logger = structlog.get_logger(__name__)


class PasteService:
    """Runs each paste operation as read, edit, authorize, write."""

    def __init__(
        self,
        store: PasteStore,
        manager: PasteLifecycleManager,
        guard: AuthorizationGuard | None = None,
    ) -> None:
        self.store = store
        self.manager = manager
        self.guard = guard or AuthorizationGuard()

    async def create(self, body: PasteCreate) -> Paste:
        paste = self.manager.create(body)
        stored = await self.store.insert(paste)
        logger.info(
            "paste_created",
            paste_id=stored.id,
            lines=len(stored.content),
            file_type=stored.file_type,
            expires_at=stored.expires_at.isoformat(),
        )
        return stored

    async def get(self, paste_id: str) -> Paste:
        """Return the live paste.

        Raises:
            PasteNotFoundError: no live paste has this id
        """
        paste = await self.store.get(paste_id)
        if paste is None:
            raise PasteNotFoundError(paste_id)
        return paste

    async def edit(self, paste_id: str, body: PasteUpdate) -> Paste:
        """Apply an authorized partial edit.

        The edit is validated before the access key is checked, and the key is
        checked against the stored paste, never the edited copy.

        Raises:
            PasteNotFoundError: no live paste has this id
            ValidationError: the edit is empty, a no-op or out of range
            AuthorizationError: access key missing or wrong
            ConflictError: the paste changed since it was read
        """
        existing = await self.get(paste_id)
        edited = self.manager.edit(existing, body)
        self.guard.authorize(body.access_key, existing.access_key)

        stored = await self.store.update(edited, expected_revision=existing.revision)
        if stored is None:
            logger.warning(
                "paste_update_conflict",
                paste_id=paste_id,
                expected_revision=existing.revision,
            )
            raise ConflictError(paste_id)

        logger.info(
            "paste_updated",
            paste_id=paste_id,
            revision=stored.revision,
            access_key_rotated=stored.access_key != existing.access_key,
            expires_at=stored.expires_at.isoformat(),
        )
        return stored

    async def delete(self, paste_id: str, body: PasteDelete) -> None:
        """Delete a paste after checking its access key.

        Raises:
            PasteNotFoundError: no live paste has this id
            AuthorizationError: access key missing or wrong
            PersistenceError: the delete was not applied
        """
        existing = await self.get(paste_id)
        self.guard.authorize(body.access_key, existing.access_key)

        deleted = await self.store.delete(paste_id, existing.access_key)
        if not deleted:
            logger.error("paste_delete_not_applied", paste_id=paste_id)
            raise PersistenceError()

        logger.info("paste_deleted", paste_id=paste_id)

    async def prune(self) -> int:
        """Remove expired pastes from storage."""
        removed = await self.store.cleanup_expired()
        logger.info("expired_pastes_pruned", count=removed)
        return removed
