"""Command to remove expired pastes from the database."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from paste_server.cli.helpers import load_settings_or_exit
from paste_server.config.settings import Settings, config_manager
from paste_server.db import close_db, init_db
from paste_server.db.repositories import PasteRepository
from paste_server.exceptions import PersistenceError
from paste_server.pastes import PasteLifecycleManager, PasteService


console = Console()


async def prune_expired(settings: Settings) -> int:
    """Open the configured database, delete expired pastes and close it."""
    await init_db(settings.storage.database_path)
    try:
        service = PasteService(
            store=PasteRepository(),
            manager=PasteLifecycleManager(settings.paste),
        )
        return await service.prune()
    finally:
        await close_db()


def prune(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="TOML configuration file",
    ),
    database: Path | None = typer.Option(
        None, "--database", "-d", help="SQLite database file to prune"
    ),
) -> None:
    """Delete expired pastes from the database."""
    cli_overrides = config_manager.get_cli_overrides_from_args(
        backend="sqlite" if database else None,
        database_path=database,
    )
    settings = load_settings_or_exit(config, cli_overrides)

    if settings.storage.backend == "memory":
        console.print("[yellow]Memory storage keeps nothing between runs.[/yellow]")
        return

    try:
        removed = asyncio.run(prune_expired(settings))
    except PersistenceError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    noun = "paste" if removed == 1 else "pastes"
    console.print(f"[green]Removed {removed} expired {noun}.[/green]")
