"""Pydantic models for pastes and the request bodies that act on them."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def format_timestamp(value: datetime) -> str:
    """Render a timestamp the way clients see it, e.g. ``2026-11-01 09:30:00 +0000 UTC``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S +0000 UTC")


# ============================================================================
# Request bodies
# ============================================================================


class _StrictBody(BaseModel):
    """Request body base: no unknown fields, no coercion between JSON types."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


class PasteCreate(_StrictBody):
    """Body of ``POST /``.

    Every field is optional at decode time; the lifecycle manager decides what
    is required. A supplied ``accessKey`` is accepted and ignored.
    """

    content: list[str] | None = Field(default=None, description="Lines of text")
    name: str | None = Field(default=None, description="Display label")
    file_type: str | None = Field(
        default=None, alias="fileType", description="Syntax hint"
    )
    expires_in: int | None = Field(
        default=None, alias="expiresIn", description="Lifetime in days"
    )
    access_key: str | None = Field(default=None, alias="accessKey")


class PasteUpdate(PasteCreate):
    """Body of ``PUT /{id}``.

    ``accessKey`` authorizes the edit; ``newAccessKey`` rotates it.
    """

    new_access_key: str | None = Field(
        default=None,
        alias="newAccessKey",
        description="Replacement access key",
    )


class PasteDelete(_StrictBody):
    """Body of ``DELETE /{id}``."""

    access_key: str | None = Field(default=None, alias="accessKey")


# ============================================================================
# Entity
# ============================================================================


class Paste(BaseModel):
    """A stored paste."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., description="Public identifier, assigned once")
    content: list[str] = Field(..., min_length=1, description="Lines of text")
    name: str | None = Field(default=None, description="Display label")
    file_type: str = Field(..., description="Syntax hint")
    expires_at: datetime = Field(..., description="Absolute expiry (UTC)")
    access_key: str = Field(..., description="Secret required to edit or delete")
    revision: int = Field(default=0, ge=0, description="Committed edit count")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        current = now or datetime.now(UTC)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return expires_at <= current

    def to_public(self) -> "PasteView":
        """Client-facing projection: no id, access key or revision."""
        return PasteView(
            content=list(self.content),
            name=self.name,
            file_type=self.file_type,
            expires_at=format_timestamp(self.expires_at),
        )


# ============================================================================
# Responses
# ============================================================================


class PasteView(BaseModel):
    """Response of ``GET /{id}``."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[str]
    name: str | None = None
    file_type: str = Field(
        serialization_alias="fileType", validation_alias="fileType"
    )
    expires_at: str = Field(
        serialization_alias="expiresAt",
        validation_alias="expiresAt",
        description="Expiry rendered as YYYY-MM-DD HH:MM:SS +0000 UTC",
    )


class PasteCreatedResponse(BaseModel):
    """Response of ``POST /``."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    access_key: str = Field(
        serialization_alias="accessKey",
        validation_alias="accessKey",
        description="Secret required to edit or delete; shown only once",
    )
    expires_at: str = Field(
        serialization_alias="expiresAt", validation_alias="expiresAt"
    )


class PasteUpdatedResponse(BaseModel):
    """Response of ``PUT /{id}``."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    expires_at: str = Field(
        serialization_alias="expiresAt", validation_alias="expiresAt"
    )
