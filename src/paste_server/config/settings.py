"""Top-level settings for paste-server and the helpers that load them.

Values are layered, lowest precedence first:

* defaults declared on the section models
* a TOML file (``CONFIG_FILE`` or the first discovered candidate)
* ``.env`` and environment variables, nested with ``__`` (``SERVER__PORT``)
* CLI overrides, merged into the file data one section at a time
"""

import os
import tomllib
from pathlib import Path
from typing import Any

import orjson
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paste_server.config.discovery import find_toml_config_file

from .paste import PasteSettings
from .server import ServerSettings
from .storage import StorageSettings


__all__ = [
    "Settings",
    "ConfigurationError",
    "ConfigurationManager",
    "CONFIG_OVERRIDES_ENV",
    "config_manager",
    "get_settings",
]


# CLI overrides travel to the uvicorn-imported app factory through this variable
CONFIG_OVERRIDES_ENV = "PASTE_SERVER_CONFIG_OVERRIDES"

SERVER_OVERRIDE_KEYS = ("host", "port", "log_level", "log_file", "json_logs", "reload")
STORAGE_OVERRIDE_KEYS = ("backend", "database_path")

_LOAD_ERRORS = (OSError, ValueError, tomllib.TOMLDecodeError)


class ConfigurationError(Exception):
    """The configuration file or its values could not be used."""


def _as_section(value: Any, section: type[BaseSettings]) -> Any:
    """Turn raw section data into an instance of ``section``."""
    if value is None:
        return section()
    if isinstance(value, dict):
        return section(**value)
    if isinstance(value, BaseSettings) and not isinstance(value, section):
        return section(**value.model_dump())
    return value


def _merge_sections(
    base: dict[str, Any], overrides: dict[str, Any]
) -> dict[str, Any]:
    merged = dict(base)
    for name, values in overrides.items():
        current = merged.get(name)
        if isinstance(current, dict) and isinstance(values, dict):
            merged[name] = current | values
        else:
            merged[name] = values
    return merged


class Settings(BaseSettings):
    """Root settings object holding the server, paste and storage sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Bind address and logging",
    )
    paste: PasteSettings = Field(
        default_factory=PasteSettings,
        description="Paste size, lifetime and access key settings",
    )
    storage: StorageSettings = Field(
        default_factory=StorageSettings,
        description="Where pastes are kept",
    )

    @field_validator("server", mode="before")
    @classmethod
    def _server_section(cls, v: Any) -> Any:
        return _as_section(v, ServerSettings)

    @field_validator("paste", mode="before")
    @classmethod
    def _paste_section(cls, v: Any) -> Any:
        return _as_section(v, PasteSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def _storage_section(cls, v: Any) -> Any:
        return _as_section(v, StorageSettings)

    @property
    def server_url(self) -> str:
        return f"http://{self.server.host}:{self.server.port}"

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Read a TOML file into a plain dictionary.

        Raises:
            ValueError: The file is unreadable or not valid TOML
        """
        try:
            return tomllib.loads(toml_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ValueError(f"Cannot read config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {toml_path}: {e}") from e

    @classmethod
    def load_config_file(cls, config_path: Path) -> dict[str, Any]:
        if config_path.suffix.lower() != ".toml":
            raise ValueError(
                f"Unsupported config file format: {config_path.suffix or '(none)'}. "
                "Use a .toml file."
            )
        return cls.load_toml_config(config_path)

    @staticmethod
    def resolve_config_path(config_path: Path | str | None) -> Path | None:
        """Explicit path, then ``CONFIG_FILE``, then the discovered file."""
        if config_path is None:
            config_path = os.environ.get("CONFIG_FILE") or None
        if config_path is None:
            return find_toml_config_file()
        return Path(config_path)

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **overrides: Any
    ) -> "Settings":
        """Build settings from a TOML file plus per-section overrides.

        A missing file is not an error; defaults and the environment apply.
        """
        path = cls.resolve_config_path(config_path)
        file_data = cls.load_config_file(path) if path and path.exists() else {}
        return cls(**_merge_sections(file_data, overrides))


class ConfigurationManager:
    """Loads settings for the CLI and remembers the last result.

    The cache is keyed on the config path and the overrides, so a command
    asking for different values always gets a fresh load.
    """

    def __init__(self) -> None:
        self._settings: Settings | None = None
        self._cache_key: tuple[Path | None, dict[str, Any]] | None = None

    def load_settings(
        self,
        config_path: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Settings:
        key = (config_path, cli_overrides or {})
        if self._settings is not None and key == self._cache_key:
            return self._settings

        try:
            settings = Settings.from_config(config_path=config_path, **key[1])
        except _LOAD_ERRORS as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        self._settings, self._cache_key = settings, key
        return settings

    def get_cli_overrides_from_args(self, **cli_args: Any) -> dict[str, Any]:
        """Group CLI option values into settings sections, skipping unset ones."""
        supplied = {k: v for k, v in cli_args.items() if v is not None}
        overrides: dict[str, Any] = {}

        server = {k: supplied[k] for k in SERVER_OVERRIDE_KEYS if k in supplied}
        if server:
            overrides["server"] = server

        storage = {k: supplied[k] for k in STORAGE_OVERRIDE_KEYS if k in supplied}
        if "database_path" in storage:
            storage["database_path"] = str(storage["database_path"])
        if storage:
            overrides["storage"] = storage

        return overrides

    def reset(self) -> None:
        self._settings = None
        self._cache_key = None


config_manager = ConfigurationManager()


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Settings for the app factory, including overrides passed by the CLI.

    Raises:
        ValueError: The configuration could not be loaded
    """
    raw_overrides = os.environ.get(CONFIG_OVERRIDES_ENV)
    overrides: dict[str, Any] = {}
    if raw_overrides:
        try:
            overrides = orjson.loads(raw_overrides)
        except orjson.JSONDecodeError as e:
            raise ValueError(
                f"Configuration error: {CONFIG_OVERRIDES_ENV} is not valid JSON"
            ) from e

    try:
        return Settings.from_config(config_path=config_path, **overrides)
    except _LOAD_ERRORS as e:
        raise ValueError(f"Configuration error: {e}") from e
