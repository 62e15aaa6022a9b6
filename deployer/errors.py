"""Exception hierarchy shared by the container, inventory and services."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "DeployerError",
    "ContainerError",
    "UnknownTypeError",
    "NotInstantiableError",
    "CircularDependencyError",
    "UnresolvableParameterError",
    "InventoryError",
    "ParseError",
    "StorageError",
    "RepositoryError",
    "ValidationError",
    "SSHConnectionError",
]


class DeployerError(Exception):
    """Base class for every error the CLI knows how to render."""


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------

class ContainerError(DeployerError):
    """Raised when the container cannot build a requested type.

    ``resolution_path`` lists ``(parameter, declaring type)`` pairs, innermost
    first, recorded while the error propagates up through nested builds.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.resolution_path: list[tuple[str, str]] = []

    def add_context(self, parameter: str, declaring_type: str) -> None:
        self.resolution_path.append((parameter, declaring_type))

    def __str__(self) -> str:
        if not self.resolution_path:
            return self.message
        trail = "; ".join(
            f"parameter '{param}' of {owner}" for param, owner in self.resolution_path
        )
        return f"{self.message} (while resolving {trail})"


class UnknownTypeError(ContainerError):
    """The requested type does not exist or is not a class."""


class NotInstantiableError(ContainerError):
    """The requested type is abstract or a protocol."""


class CircularDependencyError(ContainerError):
    """A type transitively depends on itself."""

    def __init__(self, chain: list[str]) -> None:
        super().__init__(f"Circular dependency detected: {' -> '.join(chain)}")
        self.chain = chain


class UnresolvableParameterError(ContainerError):
    """A constructor parameter has no buildable type and no default.

    When the parameter's class exists but could not be built (abstract,
    protocol), ``cause`` holds the underlying container error.
    """

    def __init__(
        self,
        parameter: str,
        declaring_type: str,
        cause: Optional[ContainerError] = None,
    ) -> None:
        message = f"Cannot resolve parameter '{parameter}' in class {declaring_type}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.parameter = parameter
        self.declaring_type = declaring_type
        self.cause = cause


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

class InventoryError(DeployerError):
    """Base class for inventory file failures."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class ParseError(InventoryError):
    """The inventory file exists but is not valid YAML."""


class StorageError(InventoryError):
    """The inventory file or its directory could not be read or written."""


class RepositoryError(DeployerError):
    """A repository rejected an operation (e.g. duplicate record)."""


class ValidationError(DeployerError, ValueError):
    """User supplied input failed validation."""


class SSHConnectionError(DeployerError):
    """An SSH connectivity check failed."""
