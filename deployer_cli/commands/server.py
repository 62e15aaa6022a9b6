"""Server inventory commands."""

from typing import Optional

import typer

from deployer.errors import SSHConnectionError
from deployer.inventory import ServerDTO, ServerRepository, SiteRepository
from deployer.inventory.models import DEFAULT_SSH_PORT, DEFAULT_SSH_USERNAME
from deployer.services import SSHService
from deployer.validation import (
    validate_host,
    validate_port,
    validate_server_name,
    validate_username,
)
from deployer_cli.context import abort_on_error, build, option_or_prompt
from deployer_cli.rendering import (
    display_server_info,
    error,
    h1,
    hr,
    show_command_hint,
    success,
    warning,
)

server_app = typer.Typer(help="Manage servers in the inventory.", no_args_is_help=True)


@server_app.command("add")
@abort_on_error
def server_add(
    name: Optional[str] = typer.Option(None, "--name", help="Server name."),
    host: Optional[str] = typer.Option(None, "--host", help="Host/IP address."),
    port: Optional[int] = typer.Option(None, "--port", help="SSH port (default: 22)."),
    username: Optional[str] = typer.Option(None, "--username", help="SSH username (default: root)."),
    private_key_path: Optional[str] = typer.Option(
        None, "--private-key-path", help="SSH private key path."
    ),
    skip: bool = typer.Option(False, "--skip", help="Skip SSH connection check."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt."),
) -> None:
    """Add a new server to the inventory."""
    h1("Add New Server")

    name = validate_server_name(
        option_or_prompt(name, lambda: typer.prompt("Server name (e.g. web1)"))
    )
    host = validate_host(
        option_or_prompt(host, lambda: typer.prompt("Host/IP address (e.g. 192.168.1.100)"))
    )
    port = validate_port(
        option_or_prompt(port, lambda: typer.prompt("SSH port", default=DEFAULT_SSH_PORT, type=int))
    )
    username = validate_username(
        option_or_prompt(
            username, lambda: typer.prompt("SSH username", default=DEFAULT_SSH_USERNAME)
        )
    )
    private_key_path = option_or_prompt(
        private_key_path,
        lambda: typer.prompt(
            "SSH private key path (leave empty for ~/.ssh/id_ed25519 or ~/.ssh/id_rsa)",
            default="",
            show_default=False,
        ),
    )

    server = ServerDTO(
        name=name,
        host=host,
        port=port,
        username=username,
        private_key_path=private_key_path or None,
    )

    hr()
    display_server_info(server)

    # Verify connectivity
    if not skip:
        skip = not typer.confirm("Test SSH connection before saving?", default=True)

    if skip:
        warning("Skipping SSH connection check")
        typer.echo("")
    else:
        _test_connection(server)

    if not yes and not typer.confirm("Save this server to inventory?", default=True):
        warning("Cancelled adding server")
        return

    build(ServerRepository).create(server)
    success("Server added successfully")
    typer.echo("")

    show_command_hint(
        "server add",
        {
            "name": server.name,
            "host": server.host,
            "port": server.port,
            "username": server.username,
            "private-key-path": server.private_key_path,
            "skip": skip,
            "yes": True,
        },
    )


@server_app.command("list")
@abort_on_error
def server_list() -> None:
    """List all servers in the inventory with the sites deployed to them."""
    servers = build(ServerRepository).all()
    if not servers:
        warning("No servers found in inventory")
        typer.echo("Use 'deployer server add' to add a server.")
        return

    sites = build(SiteRepository)

    h1("All Servers")
    for index, server in enumerate(servers):
        display_server_info(server)

        server_sites = sites.find_by_server(server.name)
        if server_sites:
            typer.echo("  Sites:")
            for site in server_sites:
                typer.echo(f"    • {site.domain}")
            typer.echo("")

        if index < len(servers) - 1:
            typer.echo("  ───")
            typer.echo("")


@server_app.command("delete")
@abort_on_error
def server_delete(
    name: Optional[str] = typer.Option(None, "--name", help="Server name."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt."),
) -> None:
    """Delete a server from the inventory."""
    repository = build(ServerRepository)
    servers = repository.all()
    if not servers:
        warning("No servers found in inventory")
        typer.echo("Use 'deployer server add' to add a server.")
        return

    h1("Delete Server")

    if name is None:
        typer.echo("Available servers: " + ", ".join(s.name for s in servers))
        name = typer.prompt("Select server")

    server = repository.find_by_name(name)
    if server is None:
        error(f"Server '{name}' not found in inventory")
        raise typer.Exit(code=1)

    display_server_info(server)

    if not yes and not typer.confirm("Are you sure you want to delete this server?", default=True):
        warning("Cancelled deleting server")
        return

    repository.delete(server.name)
    success(f"Server '{server.name}' deleted successfully")
    typer.echo("")

    show_command_hint("server delete", {"name": server.name, "yes": True})


def _test_connection(server: ServerDTO) -> None:
    """Check SSH connectivity, printing troubleshooting tips on failure."""
    typer.echo("Connecting to server...")
    try:
        build(SSHService).assert_can_connect(
            server.host, server.port, server.username, server.private_key_path
        )
    except SSHConnectionError as exc:
        error(str(exc))
        typer.echo("")
        typer.echo("  Common issues:")
        typer.echo("  • Check that the server is accessible from your network")
        typer.echo(f"  • Verify SSH is running on the server (port {server.port})")
        typer.echo("  • Ensure your SSH key has correct permissions (chmod 600)")
        typer.echo(f"  • Confirm username \"{server.username}\" exists on the server")
        typer.echo("")
        typer.echo("  Tip: Use --skip to add server without testing connection.")
        raise typer.Exit(code=1)

    success("SSH connection successful")
