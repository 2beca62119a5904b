"""HTTP server configuration settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paste_server.core.validators import Port


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ServerSettings(BaseSettings):
    """Settings for the uvicorn server and its logging."""

    model_config = SettingsConfigDict(
        env_prefix="PASTE_SERVER_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Interface to bind")  # nosec B104
    port: Port = Field(default=3000, description="Port to run the server on")
    log_level: LogLevel = Field(
        default="WARNING",
        description="Minimum log level; INFO enables per-request access logs",
    )
    log_file: str | None = Field(
        default=None,
        description="Append logs to this file instead of stdout",
    )
    json_logs: bool = Field(default=False, description="Render logs as JSON")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("log_file", mode="before")
    @classmethod
    def empty_log_file_is_stdout(cls, v: object) -> object:
        return v or None
