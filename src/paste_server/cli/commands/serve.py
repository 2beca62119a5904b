"""Command to run the paste HTTP server."""

import os
from pathlib import Path

import orjson
import typer
import uvicorn
from rich.console import Console
from structlog import get_logger

from paste_server.cli.helpers import load_settings_or_exit
from paste_server.config.settings import CONFIG_OVERRIDES_ENV, config_manager
from paste_server.core.logging import setup_logging


console = Console()
logger = get_logger(__name__)


def start(
    host: str | None = typer.Option(
        None, "--host", help="Interface to bind (default 0.0.0.0)"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", min=1, max=65535, help="Port to listen on (default 3000)"
    ),
    logfile: Path | None = typer.Option(
        None, "--logfile", "-l", help="Append logs to this file instead of stdout"
    ),
    json_logs: bool = typer.Option(
        False, "--json", "-j", help="Write logs as JSON objects"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log informational messages, not just warnings"
    ),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="TOML configuration file",
    ),
) -> None:
    """Start the paste server."""
    cli_overrides = config_manager.get_cli_overrides_from_args(
        host=host,
        port=port,
        log_file=str(logfile) if logfile else None,
        json_logs=True if json_logs else None,
        log_level="INFO" if verbose else None,
        reload=True if reload else None,
    )
    settings = load_settings_or_exit(config, cli_overrides)

    setup_logging(
        json_logs=settings.server.json_logs,
        log_level_name=settings.server.log_level,
        log_file=settings.server.log_file,
    )

    # The app factory runs inside uvicorn (and in a child process on reload),
    # so it re-reads settings from these variables
    os.environ[CONFIG_OVERRIDES_ENV] = orjson.dumps(cli_overrides).decode()
    if config is not None:
        os.environ["CONFIG_FILE"] = str(config)

    logger.info(
        "cli_start",
        host=settings.server.host,
        port=settings.server.port,
        storage_backend=settings.storage.backend,
        reload=settings.server.reload,
    )

    uvicorn.run(
        "paste_server.api.app:get_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_config=None,
    )
