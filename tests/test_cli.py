"""Tests for the command-line entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from skyport_panel import cli
from skyport_panel.security.auth import AuthManager


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch) -> None:
    """Keep the global structlog configuration untouched."""
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "panel.yaml"
    path.write_text("auth:\n  secret_key: cli-secret\n")
    return path


def test_token_command_prints_admin_token(config_file: Path, capsys) -> None:
    code = cli.main(["--config", str(config_file), "token", "alice", "--admin"])

    assert code == 0
    token = capsys.readouterr().out.strip().splitlines()[-1]
    identity = AuthManager(secret_key="cli-secret").identify(token)
    assert identity is not None
    assert identity.username == "alice"
    assert identity.admin is True


def test_token_without_secret_fails(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("SKYPORT_SECRET_KEY", raising=False)

    code = cli.main(["--config", str(tmp_path / "missing.yaml"), "token", "alice"])

    assert code == 2
    assert "secret_key" in capsys.readouterr().err


def test_serve_applies_overrides(config_file: Path) -> None:
    with patch.object(cli, "serve") as mock_serve:
        code = cli.main(["--config", str(config_file), "serve", "--port", "8123"])

    assert code == 0
    config = mock_serve.call_args.args[0]
    assert config.server.port == 8123
    assert config.auth.secret_key == "cli-secret"


def test_serve_accepts_config_after_subcommand(config_file: Path) -> None:
    with patch.object(cli, "serve") as mock_serve:
        code = cli.main(["serve", "--config", str(config_file), "--port", "8080"])

    assert code == 0
    config = mock_serve.call_args.args[0]
    assert config.server.port == 8080
    assert config.auth.secret_key == "cli-secret"


def test_token_accepts_config_after_subcommand(config_file: Path, capsys) -> None:
    code = cli.main(["token", "alice", "--config", str(config_file)])

    assert code == 0
    token = capsys.readouterr().out.strip().splitlines()[-1]
    identity = AuthManager(secret_key="cli-secret").identify(token)
    assert identity is not None
    assert identity.admin is False


def test_default_config_path_when_omitted() -> None:
    args = cli.parse_args(["serve"])

    assert args.config == "config/panel.yaml"
