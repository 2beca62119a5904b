"""Paste storage configuration settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from paste_server.core.system import get_paste_server_data_dir


def default_database_path() -> Path:
    return get_paste_server_data_dir() / "pastes.db"


class StorageSettings(BaseSettings):
    """Where and how pastes are persisted."""

    model_config = SettingsConfigDict(
        env_prefix="PASTE_STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="sqlite for a persistent database, memory for ephemeral runs",
    )
    database_path: Path = Field(
        default_factory=default_database_path,
        description="SQLite database file used by the sqlite backend",
    )
