"""Locate the TOML configuration file."""

import subprocess  # nosec B404 - only runs a fixed git command
from pathlib import Path

from paste_server.core.system import get_paste_server_config_dir


# Checked in this order inside each project directory
PROJECT_CONFIG_NAMES = (".paste_server.toml", "paste_server.toml")
USER_CONFIG_NAME = "config.toml"


def config_file_candidates(start: Path | None = None) -> list[Path]:
    """List every location a config file may live, most specific first.

    The working directory (or ``start``) comes first, then the enclosing git
    repository root, then ``config.toml`` in the platform config directory.
    """
    start = (start or Path.cwd()).resolve()
    directories = [start]

    git_root = find_git_root(start)
    if git_root is not None and git_root != start:
        directories.append(git_root)

    candidates = [
        directory / name for directory in directories for name in PROJECT_CONFIG_NAMES
    ]
    candidates.append(get_paste_server_config_dir() / USER_CONFIG_NAME)
    return candidates


def find_toml_config_file(start: Path | None = None) -> Path | None:
    """Return the first existing config file, or None."""
    for candidate in config_file_candidates(start):
        if candidate.is_file():
            return candidate
    return None


def find_git_root(path: Path | None = None) -> Path | None:
    """Find the root directory of the git repository containing ``path``."""
    try:
        result = subprocess.run(  # nosec B603, B607
            ["git", "rev-parse", "--show-toplevel"],
            cwd=path or Path.cwd(),
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None
    return Path(result.stdout.strip())
