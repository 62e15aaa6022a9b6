"""Shared state and helpers for deployer commands.

Holds the process-wide dependency container and the small input helpers
every command uses (option-or-prompt, error boundary).
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import structlog
import typer

from deployer.container import Container
from deployer.errors import DeployerError
from deployer.inventory import ServerRepository
from deployer_cli.rendering import error, warning

log = structlog.get_logger(__name__)

T = TypeVar("T")

# One container per CLI process; it caches reflection data, not instances
container = Container()


def build(cls: type[T]) -> T:
    """Build ``cls`` with the CLI container."""
    return container.build(cls)


def option_or_prompt(value: Optional[T], prompt: Callable[[], T]) -> T:
    """Return ``value`` when the option was given, otherwise ask for it."""
    return value if value is not None else prompt()


def abort_on_error(func: Callable) -> Callable:
    """Decorator turning DeployerError into a rendered message and exit code 1."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DeployerError as exc:
            log.debug("command_failed", command=func.__name__, error_type=type(exc).__name__)
            error(str(exc))
            raise typer.Exit(code=1)

    return wrapper


def require_servers(func: Callable) -> Callable:
    """Decorator for commands that make no sense with an empty server inventory.

    Aborts execution if no server has been added yet.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not build(ServerRepository).all():
            warning("No servers available")
            typer.echo("")
            typer.echo("You must add at least one server first.")
            typer.echo("Run 'deployer server add' to add an existing server.")
            raise typer.Exit(code=1)
        return func(*args, **kwargs)

    return wrapper
