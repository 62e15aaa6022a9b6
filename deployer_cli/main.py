"""deployer CLI entry-point for all inventory operations.

Usage:
    deployer --help

Sub-command groups:
    server    → servers (name, host, port, SSH user/key)
    site      → sites (domain, repository, branch, servers)
"""

from __future__ import annotations

from typing import Optional

import typer

from deployer.log import configure_logging
from deployer.services import VersionService
from deployer_cli.commands.server import server_app
from deployer_cli.commands.site import site_app
from deployer_cli.context import build
from deployer_cli.rendering import banner

app = typer.Typer(
    name="deployer",
    help="Manage deployment servers and sites.",
    no_args_is_help=True,
)
app.add_typer(server_app, name="server")
app.add_typer(site_app, name="site")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"DeployerPY {build(VersionService).get_version()}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log output format: console | json."
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Manage deployment servers and sites."""
    configure_logging(level="DEBUG" if verbose else None, fmt=log_format)
    if ctx.invoked_subcommand is not None:
        banner(build(VersionService).get_version())


if __name__ == "__main__":
    app()
