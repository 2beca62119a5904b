"""SQLModel database models."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


class PasteRecord(SQLModel, table=True):
    """Stored paste.

    Timestamps are bound as timezone-aware UTC. SQLite keeps no offset, so
    values read back are naive and the repository marks them UTC again.
    """

    __tablename__ = "pastes"

    id: str = Field(primary_key=True)
    content: list[str] = Field(sa_column=Column(JSON, nullable=False))
    name: str | None = None
    file_type: str
    access_key: str
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    # Bumped on every committed edit; guards conditional updates
    revision: int = Field(default=0)
