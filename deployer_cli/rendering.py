"""Utilities for rendering inventory records and messages in the CLI."""

from __future__ import annotations

import shlex
from typing import Any, Mapping

import typer

from deployer.inventory import ServerDTO, SiteDTO

DEFAULT_KEY_LABEL = "default (~/.ssh/id_ed25519 or ~/.ssh/id_rsa)"


def banner(version: str) -> None:
    typer.secho(f"DeployerPY {version}", bold=True)
    hr()


def h1(text: str) -> None:
    typer.secho(f"\n{text}\n", bold=True)


def hr() -> None:
    typer.echo("─" * 72)


def success(message: str) -> None:
    typer.secho(f"✅ {message}", fg=typer.colors.GREEN)


def warning(message: str) -> None:
    typer.secho(f"⚠️  {message}", fg=typer.colors.YELLOW)


def error(message: str) -> None:
    typer.secho(f"❌ {message}", fg=typer.colors.RED)


def display_server_info(server: ServerDTO) -> None:
    typer.echo(f"  Name: {server.name}")
    typer.echo(f"  Host: {server.host}")
    typer.echo(f"  Port: {server.port}")
    typer.echo(f"  User: {server.username}")
    typer.echo(f"  Key:  {server.private_key_path or DEFAULT_KEY_LABEL}")
    typer.echo("")


def display_site_info(site: SiteDTO) -> None:
    typer.echo(f"  Domain:  {site.domain}")
    if site.is_local:
        typer.echo("  Source:  local files")
    else:
        typer.echo(f"  Repo:    {site.repo}")
        typer.echo(f"  Branch:  {site.branch}")
    typer.echo(f"  Servers: {', '.join(site.servers) or '(none)'}")
    typer.echo("")


def format_command_hint(command: str, options: Mapping[str, Any]) -> str:
    """Build the non-interactive equivalent of a command.

    ``None`` and ``False`` options are omitted; ``True`` becomes a bare flag.
    """
    parts = ["deployer", *command.split()]
    for name, value in options.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f"--{name}")
        else:
            parts.extend([f"--{name}", shlex.quote(str(value))])
    return " ".join(parts)


def show_command_hint(command: str, options: Mapping[str, Any]) -> None:
    typer.echo("Non-interactive command to repeat this:")
    typer.secho(f"  {format_command_hint(command, options)}", fg=typer.colors.CYAN)
    typer.echo("")
