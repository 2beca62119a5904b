"""Tests for the paste-server command line interface."""

import asyncio
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import orjson
import pytest
from typer.testing import CliRunner

from paste_server import __version__
from paste_server.cli.main import app
from paste_server.config.settings import CONFIG_OVERRIDES_ENV, config_manager
from paste_server.db import close_db, init_db
from paste_server.db.repositories import PasteRepository
from paste_server.pastes.models import Paste


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep CLI runs away from real config files and restore env afterwards."""
    monkeypatch.setenv("CONFIG_FILE", str(tmp_path / "no-config.toml"))
    monkeypatch.setenv(CONFIG_OVERRIDES_ENV, "")
    monkeypatch.chdir(tmp_path)
    config_manager.reset()
    yield
    config_manager.reset()


def seed_database(path: Path, expired: int, live: int) -> None:
    async def seed() -> None:
        await init_db(path)
        repo = PasteRepository()
        now = datetime.now(UTC)
        for i in range(expired + live):
            days = -1 if i < expired else 5
            await repo.insert(
                Paste(
                    id=f"paste-{i}",
                    content=["x"],
                    file_type="plaintext",
                    expires_at=now + timedelta(days=days),
                    access_key="k" * 25,
                )
            )
        await close_db()

    asyncio.run(seed())


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestStartCommand:
    """Tests for the start command."""

    def test_runs_uvicorn_with_cli_options(self, tmp_path):
        log_file = tmp_path / "server.log"

        with (
            patch("paste_server.cli.commands.serve.uvicorn.run") as mock_run,
            patch("paste_server.cli.commands.serve.setup_logging") as mock_logging,
        ):
            result = runner.invoke(
                app, ["start", "-p", "8080", "-v", "-j", "-l", str(log_file)]
            )

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert args == ("paste_server.api.app:get_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 8080
        assert kwargs["host"] == "0.0.0.0"
        mock_logging.assert_called_once_with(
            json_logs=True, log_level_name="INFO", log_file=str(log_file)
        )

    def test_defaults_to_warning_level_and_port_3000(self):
        with (
            patch("paste_server.cli.commands.serve.uvicorn.run") as mock_run,
            patch("paste_server.cli.commands.serve.setup_logging") as mock_logging,
        ):
            result = runner.invoke(app, ["start"])

        assert result.exit_code == 0, result.output
        assert mock_run.call_args.kwargs["port"] == 3000
        assert mock_logging.call_args.kwargs["log_level_name"] == "WARNING"
        assert mock_logging.call_args.kwargs["json_logs"] is False

    def test_passes_overrides_to_app_factory(self):
        with (
            patch("paste_server.cli.commands.serve.uvicorn.run"),
            patch("paste_server.cli.commands.serve.setup_logging"),
        ):
            runner.invoke(app, ["start", "--port", "9999"])

        overrides = orjson.loads(os.environ[CONFIG_OVERRIDES_ENV])
        assert overrides == {"server": {"port": 9999}}

    def test_rejects_invalid_port(self):
        result = runner.invoke(app, ["start", "-p", "0"])

        assert result.exit_code != 0

    def test_invalid_config_exits_with_error(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("[server\n")

        with patch("paste_server.cli.commands.serve.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["start", "-c", str(bad)])

        assert result.exit_code == 1
        mock_run.assert_not_called()


class TestPruneCommand:
    """Tests for the prune command."""

    def test_removes_expired_pastes(self, tmp_path):
        db_path = tmp_path / "pastes.db"
        seed_database(db_path, expired=2, live=1)

        result = runner.invoke(app, ["prune", "--database", str(db_path)])

        assert result.exit_code == 0, result.output
        assert "Removed 2 expired pastes." in result.output

    def test_singular_wording(self, tmp_path):
        db_path = tmp_path / "pastes.db"
        seed_database(db_path, expired=1, live=0)

        result = runner.invoke(app, ["prune", "-d", str(db_path)])

        assert "Removed 1 expired paste." in result.output

    def test_memory_backend_has_nothing_to_prune(self, monkeypatch):
        monkeypatch.setenv("PASTE_STORAGE_BACKEND", "memory")

        result = runner.invoke(app, ["prune"])

        assert result.exit_code == 0
        assert "Memory storage" in result.output
