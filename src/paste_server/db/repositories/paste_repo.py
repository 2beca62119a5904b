"""Paste repository for database operations."""

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from paste_server.db.engine import get_session
from paste_server.db.models import PasteRecord
from paste_server.exceptions import PersistenceError
from paste_server.pastes.models import Paste


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _from_record(record: PasteRecord) -> Paste:
    return Paste(
        id=record.id,
        content=list(record.content),
        name=record.name,
        file_type=record.file_type,
        expires_at=_as_utc(record.expires_at),
        access_key=record.access_key,
        revision=record.revision,
        created_at=_as_utc(record.created_at),
    )


class PasteRepository:
    """SQLite-backed paste store."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def _now(self) -> datetime:
        return _as_utc(self._clock())

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with get_session() as session:
                yield session
        except SQLAlchemyError as e:
            raise PersistenceError() from e

    async def insert(self, paste: Paste) -> Paste:
        """Store a new paste."""
        async with self._session() as session:
            record = PasteRecord(
                id=paste.id,
                content=list(paste.content),
                name=paste.name,
                file_type=paste.file_type,
                access_key=paste.access_key,
                expires_at=_as_utc(paste.expires_at),
                created_at=_as_utc(paste.created_at),
                revision=0,
            )
            session.add(record)
            await session.commit()
            await session.refresh(record)
            return _from_record(record)

    async def get(self, paste_id: str) -> Paste | None:
        """Get a paste if it exists and hasn't expired."""
        async with self._session() as session:
            result = await session.execute(
                select(PasteRecord).where(
                    PasteRecord.id == paste_id,
                    PasteRecord.expires_at > self._now(),
                )
            )
            record = result.scalar_one_or_none()
            return _from_record(record) if record else None

    async def update(self, paste: Paste, expected_revision: int) -> Paste | None:
        """Write the paste only if nobody committed since ``expected_revision``."""
        new_revision = expected_revision + 1
        async with self._session() as session:
            result = await session.execute(
                update(PasteRecord)
                .where(
                    PasteRecord.id == paste.id,
                    PasteRecord.revision == expected_revision,
                )
                .values(
                    content=list(paste.content),
                    name=paste.name,
                    file_type=paste.file_type,
                    access_key=paste.access_key,
                    expires_at=_as_utc(paste.expires_at),
                    revision=new_revision,
                )
            )
            await session.commit()
            if result.rowcount == 0:
                return None
        return paste.model_copy(update={"revision": new_revision})

    async def delete(self, paste_id: str, expected_access_key: str) -> bool:
        """Delete a paste whose access key still matches. Returns True if deleted."""
        async with self._session() as session:
            result = await session.execute(
                delete(PasteRecord).where(
                    PasteRecord.id == paste_id,
                    PasteRecord.access_key == expected_access_key,
                )
            )
            await session.commit()
            return result.rowcount > 0

    async def cleanup_expired(self) -> int:
        """Delete all expired pastes. Returns count deleted."""
        async with self._session() as session:
            result = await session.execute(
                delete(PasteRecord).where(PasteRecord.expires_at <= self._now())
            )
            await session.commit()
            return result.rowcount
