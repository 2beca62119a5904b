"""Shared helpers for CLI commands."""

from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from paste_server.config.settings import (
    ConfigurationError,
    Settings,
    config_manager,
)


console = Console(stderr=True)


def load_settings_or_exit(
    config: Path | None, cli_overrides: dict[str, Any]
) -> Settings:
    """Load settings, printing the problem and exiting with 1 on failure."""
    try:
        return config_manager.load_settings(
            config_path=config, cli_overrides=cli_overrides
        )
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
