"""Tests for the top-level deployer app and shared CLI helpers."""

import pytest
import typer
from typer.testing import CliRunner

from deployer.errors import RepositoryError
from deployer.services import VersionService
from deployer_cli.context import abort_on_error, option_or_prompt
from deployer_cli.main import app
from deployer_cli.rendering import format_command_hint

runner = CliRunner()


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("deployer.config.settings.workspace_dir", None)
    monkeypatch.setattr(VersionService, "get_version", lambda self: "1.0.0-test")
    return tmp_path


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "DeployerPY 1.0.0-test" in result.stdout


def test_help_lists_groups():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "server" in result.stdout
    assert "site" in result.stdout


def test_subcommand_prints_banner():
    result = runner.invoke(app, ["server", "list"])
    assert result.exit_code == 0
    assert result.stdout.startswith("DeployerPY 1.0.0-test")
    assert "No servers found in inventory" in result.stdout


def test_workspace_env_relocates_inventory(tmp_path, monkeypatch):
    target = tmp_path / "elsewhere"
    monkeypatch.setattr("deployer.config.settings.workspace_dir", target)

    result = runner.invoke(
        app, ["server", "add", "--name", "web1", "--host", "10.0.0.1", "--port", "22",
              "--username", "root", "--private-key-path", "", "--skip", "--yes"],
    )
    assert result.exit_code == 0, result.stdout
    assert (target / "inventory.yml").exists()
    assert not (tmp_path / ".deployer").exists()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def test_format_command_hint():
    hint = format_command_hint(
        "server add",
        {"name": "web1", "port": 22, "private-key-path": None, "skip": False, "yes": True},
    )
    assert hint == "deployer server add --name web1 --port 22 --yes"


def test_format_command_hint_quotes_values():
    hint = format_command_hint("server add", {"private-key-path": "~/my keys/id"})
    assert hint == "deployer server add --private-key-path '~/my keys/id'"


def test_option_or_prompt():
    assert option_or_prompt("given", lambda: "asked") == "given"
    assert option_or_prompt(None, lambda: "asked") == "asked"
    assert option_or_prompt(0, lambda: 22) == 0


def test_abort_on_error_exits_with_message(capsys):
    @abort_on_error
    def failing():
        raise RepositoryError("Server 'web1' already exists")

    with pytest.raises(typer.Exit) as exc_info:
        failing()
    assert exc_info.value.exit_code == 1
    assert "❌ Server 'web1' already exists" in capsys.readouterr().out
