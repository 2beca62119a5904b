"""Paste lifecycle configuration.

These values are handed to the lifecycle manager and the request decoder at
construction time instead of being looked up while a request is processed.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paste_server.core.validators import ExpiryDays


class PasteSettings(BaseSettings):
    """Limits and defaults applied to every paste."""

    model_config = SettingsConfigDict(
        env_prefix="PASTE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    max_body_bytes: int = Field(
        default=1_048_576,
        ge=1,
        description="Largest accepted request body in bytes",
    )
    default_expiry_days: ExpiryDays = Field(
        default=14,
        description="Lifetime used when a request does not ask for one",
    )
    min_expiry_days: ExpiryDays = Field(
        default=1,
        description="Shortest lifetime a request may ask for",
    )
    max_expiry_days: ExpiryDays = Field(
        default=30,
        description="Longest lifetime a request may ask for",
    )
    access_key_length: int = Field(
        default=25,
        ge=8,
        le=128,
        description="Length of generated access keys",
    )
    default_file_type: str = Field(
        default="plaintext",
        min_length=1,
        description="File type recorded when a paste does not name one",
    )

    @model_validator(mode="after")
    def check_expiry_range(self) -> "PasteSettings":
        """Require min_expiry_days <= default_expiry_days <= max_expiry_days."""
        if not (
            self.min_expiry_days <= self.default_expiry_days <= self.max_expiry_days
        ):
            raise ValueError(
                "default_expiry_days must lie within "
                f"[{self.min_expiry_days}, {self.max_expiry_days}], "
                f"got {self.default_expiry_days}"
            )
        return self

    def in_expiry_range(self, days: int) -> bool:
        return self.min_expiry_days <= days <= self.max_expiry_days
