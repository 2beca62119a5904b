"""Process-wide async SQLite engine for the paste table.

``init_db`` must run before ``get_session``; the app does this during startup
and the ``prune`` command does it around its single operation.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from paste_server.config.storage import default_database_path


_engine: AsyncEngine | None = None
_sessions: async_sessionmaker[AsyncSession] | None = None

_NOT_INITIALIZED = "Database not initialized; the paste store opens it with init_db()"


def get_db_url(path: Path | None = None) -> str:
    """aiosqlite URL for ``path``, creating its parent directory."""
    db_path = Path(path) if path else default_database_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{db_path}"


async def init_db(path: Path | None = None) -> None:
    """Open the database at ``path`` and create missing tables.

    An engine left over from a previous call is disposed first.
    """
    global _engine, _sessions

    await close_db()
    engine = create_async_engine(get_db_url(path))
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    _engine = engine
    _sessions = async_sessionmaker(engine, expire_on_commit=False)


async def close_db() -> None:
    global _engine, _sessions

    engine, _engine, _sessions = _engine, None, None
    if engine is not None:
        await engine.dispose()


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session committed on clean exit and rolled back on error."""
    if _sessions is None:
        raise RuntimeError(_NOT_INITIALIZED)

    async with _sessions() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
