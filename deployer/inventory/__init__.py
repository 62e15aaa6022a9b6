"""Inventory layer package.

Public re-exports so callers can write::

    from deployer.inventory import InventoryStore, ServerRepository
"""

from deployer.inventory.models import ServerDTO, SiteDTO
from deployer.inventory.servers import ServerRepository
from deployer.inventory.sites import SiteRepository
from deployer.inventory.store import InventoryStore

__all__ = ["InventoryStore", "ServerDTO", "ServerRepository", "SiteDTO", "SiteRepository"]
