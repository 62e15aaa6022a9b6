"""Server records stored as a mapping keyed by name under ``servers``."""

from __future__ import annotations

from typing import Any, Optional

import structlog

from deployer.errors import RepositoryError
from deployer.inventory.models import DEFAULT_SSH_PORT, DEFAULT_SSH_USERNAME, ServerDTO
from deployer.inventory.store import SEPARATOR, InventoryStore

log = structlog.get_logger(__name__)

PREFIX = "servers"


class ServerRepository:
    def __init__(self, inventory: InventoryStore) -> None:
        self._inventory = inventory

    def create(self, server: ServerDTO) -> None:
        """Add a server.

        Raises:
            RepositoryError: A server with the same name already exists.
        """
        if self._inventory.has(self._path(server.name)):
            raise RepositoryError(f"Server '{server.name}' already exists")

        self._inventory.set(self._path(server.name), server.to_dict())
        log.info("server_created", name=server.name, host=server.host)

    def find_by_name(self, name: str) -> Optional[ServerDTO]:
        data = self._inventory.list(PREFIX).get(name)
        if data is None:
            return None
        return _hydrate(name, data)

    def all(self) -> list[ServerDTO]:
        """All servers in inventory (file) order."""
        return [_hydrate(name, data) for name, data in self._inventory.list(PREFIX).items()]

    def delete(self, name: str) -> None:
        """Remove a server; unknown names are ignored."""
        self._inventory.delete(self._path(name))
        log.info("server_deleted", name=name)

    @staticmethod
    def _path(name: str) -> str:
        return f"{PREFIX}{SEPARATOR}{name}"


def _hydrate(name: Any, data: Any) -> ServerDTO:
    """Build a ServerDTO from raw inventory data, tolerating bad fields."""
    if not isinstance(data, dict):
        data = {}

    host = data.get("host")
    port = data.get("port")
    username = data.get("username")
    key = data.get("privateKeyPath")

    return ServerDTO(
        name=str(name),
        host=host if isinstance(host, str) else "",
        port=port if isinstance(port, int) and not isinstance(port, bool) else DEFAULT_SSH_PORT,
        username=username if isinstance(username, str) and username else DEFAULT_SSH_USERNAME,
        private_key_path=key if isinstance(key, str) and key else None,
    )
