"""Main entry point for the paste-server CLI."""

import typer
from rich.console import Console

from paste_server import __version__
from paste_server.cli.commands import prune, start


console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"paste-server {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="paste-server",
    help="Anonymous paste service with expiring, access-key protected pastes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """paste-server command line interface."""


app.command(name="start")(start)
app.command(name="prune")(prune)


def main() -> None:
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
