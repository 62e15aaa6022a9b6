"""Site inventory commands."""

from typing import Optional

import typer

from deployer.errors import ValidationError
from deployer.inventory import ServerRepository, SiteDTO, SiteRepository
from deployer.services import GitService
from deployer.validation import validate_branch, validate_domain
from deployer_cli.context import abort_on_error, build, option_or_prompt, require_servers
from deployer_cli.rendering import (
    display_site_info,
    error,
    h1,
    hr,
    show_command_hint,
    success,
    warning,
)

site_app = typer.Typer(help="Manage sites in the inventory.", no_args_is_help=True)

SITE_TYPES = ("git", "local")
DEFAULT_REPO = "git@github.com:user/repo.git"
DEFAULT_BRANCH = "main"


@site_app.command("add")
@abort_on_error
@require_servers
def site_add(
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name."),
    type: Optional[str] = typer.Option(None, "--type", help="Site type: git or local."),
    repo: Optional[str] = typer.Option(None, "--repo", help="Git repository URL (for git sites)."),
    branch: Optional[str] = typer.Option(None, "--branch", help="Git branch name (for git sites)."),
    servers: Optional[str] = typer.Option(None, "--servers", help="Comma-separated server names."),
) -> None:
    """Add a new site to the inventory."""
    sites = build(SiteRepository)
    server_repository = build(ServerRepository)

    h1("Add New Site")

    domain = validate_domain(
        option_or_prompt(domain, lambda: typer.prompt("Domain name (e.g. example.com)"))
    )
    if sites.find_by_domain(domain) is not None:
        raise ValidationError(f"Domain '{domain}' already exists in inventory")

    site_type = option_or_prompt(
        type, lambda: typer.prompt("Deploy from (git/local)", default="git")
    ).lower()
    if site_type not in SITE_TYPES:
        raise ValidationError(f"Invalid site type '{site_type}'. Use 'git' or 'local'.")

    if site_type == "git":
        git = build(GitService)
        default_repo = git.detect_remote_url() or DEFAULT_REPO
        repo = option_or_prompt(
            repo, lambda: typer.prompt("Git repository URL", default=default_repo)
        )
        default_branch = git.detect_current_branch() or DEFAULT_BRANCH
        branch = validate_branch(
            option_or_prompt(branch, lambda: typer.prompt("Git branch", default=default_branch))
        )
    else:
        repo = None
        branch = None

    available = [s.name for s in server_repository.all()]
    if servers is None:
        typer.echo("Available servers: " + ", ".join(available))
        servers = typer.prompt("Servers (comma-separated)", default=available[0])

    selected = _parse_server_names(servers)
    _validate_servers(selected, available)

    site = SiteDTO(domain=domain, repo=repo, branch=branch, servers=tuple(selected))

    hr()
    display_site_info(site)

    sites.create(site)
    success("Site added successfully")
    typer.echo("")

    show_command_hint(
        "site add",
        {
            "domain": site.domain,
            "type": site_type,
            "repo": site.repo,
            "branch": site.branch,
            "servers": ",".join(site.servers),
        },
    )


@site_app.command("list")
@abort_on_error
def site_list() -> None:
    """List all sites in the inventory."""
    sites = build(SiteRepository).all()
    if not sites:
        warning("No sites found in inventory")
        typer.echo("Use 'deployer site add' to add a site.")
        return

    h1("All Sites")
    for index, site in enumerate(sites):
        display_site_info(site)
        if index < len(sites) - 1:
            typer.echo("  ───")
            typer.echo("")


@site_app.command("delete")
@abort_on_error
def site_delete(
    domain: Optional[str] = typer.Option(None, "--domain", help="Site domain."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt."),
) -> None:
    """Delete a site from the inventory."""
    repository = build(SiteRepository)
    sites = repository.all()
    if not sites:
        warning("No sites found in inventory")
        typer.echo("Use 'deployer site add' to add a site.")
        return

    h1("Delete Site")

    if domain is None:
        typer.echo("Available sites: " + ", ".join(s.domain for s in sites))
        domain = typer.prompt("Select site")

    site = repository.find_by_domain(domain)
    if site is None:
        error(f"Site '{domain}' not found in inventory")
        raise typer.Exit(code=1)

    display_site_info(site)

    if not yes and not typer.confirm("Are you sure you want to delete this site?", default=True):
        warning("Cancelled deleting site")
        return

    repository.delete(site.domain)
    success(f"Site '{site.domain}' deleted successfully")
    typer.echo("")

    show_command_hint("site delete", {"domain": site.domain, "yes": True})


def _parse_server_names(raw: str) -> list[str]:
    names = []
    for name in (part.strip() for part in raw.split(",")):
        if name and name not in names:
            names.append(name)
    return names


def _validate_servers(selected: list[str], available: list[str]) -> None:
    if not selected:
        raise ValidationError("At least one server must be selected")
    for name in selected:
        if name not in available:
            raise ValidationError(f"Server '{name}' not found in inventory")
