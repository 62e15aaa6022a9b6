"""Immutable records for servers and sites.

These are plain value objects; the repositories convert them to and from
the mappings stored in the inventory document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_SSH_PORT = 22
DEFAULT_SSH_USERNAME = "root"


@dataclass(frozen=True)
class ServerDTO:
    name: str
    host: str
    port: int = DEFAULT_SSH_PORT
    username: str = DEFAULT_SSH_USERNAME
    private_key_path: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Mapping stored at ``servers.<name>`` (the name is the key)."""
        return {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "privateKeyPath": self.private_key_path,
        }


@dataclass(frozen=True)
class SiteDTO:
    domain: str
    repo: Optional[str] = None
    branch: Optional[str] = None
    servers: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_local(self) -> bool:
        """Sites without a repository deploy from local files."""
        return self.repo is None

    def to_dict(self) -> dict[str, Any]:
        """Mapping stored as one entry of the ``sites`` list."""
        return {
            "domain": self.domain,
            "repo": self.repo,
            "branch": self.branch,
            "servers": list(self.servers),
        }
