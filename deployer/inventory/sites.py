"""Site records stored as an ordered list under ``sites``.

Sites are a list rather than a mapping because their identifier (the
domain) always contains dots, which the store's path syntax cannot escape.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from deployer.errors import RepositoryError
from deployer.inventory.models import SiteDTO
from deployer.inventory.store import InventoryStore

log = structlog.get_logger(__name__)

PREFIX = "sites"


class SiteRepository:
    def __init__(self, inventory: InventoryStore) -> None:
        self._inventory = inventory

    def create(self, site: SiteDTO) -> None:
        """Append a site.

        Raises:
            RepositoryError: A site with the same domain already exists.
        """
        records = self._records()
        if any(record.get("domain") == site.domain for record in records):
            raise RepositoryError(f"Site '{site.domain}' already exists")

        records.append(site.to_dict())
        self._inventory.set(PREFIX, records)
        log.info("site_created", domain=site.domain, servers=list(site.servers))

    def find_by_domain(self, domain: str) -> Optional[SiteDTO]:
        for record in self._records():
            if record.get("domain") == domain:
                return _hydrate(record)
        return None

    def find_by_server(self, server_name: str) -> list[SiteDTO]:
        """Sites deployed to the given server."""
        return [site for site in self.all() if server_name in site.servers]

    def all(self) -> list[SiteDTO]:
        return [_hydrate(record) for record in self._records()]

    def delete(self, domain: str) -> None:
        """Remove a site; unknown domains are ignored."""
        records = self._records()
        remaining = [record for record in records if record.get("domain") != domain]
        if len(remaining) == len(records):
            return

        self._inventory.set(PREFIX, remaining)
        log.info("site_deleted", domain=domain)

    def _records(self) -> list[dict[str, Any]]:
        """Raw site mappings, initialising ``sites`` when missing or malformed."""
        records = self._inventory.get(PREFIX)
        if not isinstance(records, list):
            records = []
            self._inventory.set(PREFIX, records)
        return [record for record in records if isinstance(record, dict)]


def _hydrate(data: dict[str, Any]) -> SiteDTO:
    domain = data.get("domain")
    repo = data.get("repo")
    branch = data.get("branch")
    servers = data.get("servers")

    return SiteDTO(
        domain=domain if isinstance(domain, str) else "",
        repo=repo if isinstance(repo, str) and repo else None,
        branch=branch if isinstance(branch, str) and branch else None,
        servers=tuple(s for s in servers if isinstance(s, str)) if isinstance(servers, list) else (),
    )
