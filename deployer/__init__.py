"""deployer: server and site inventory management.

Public re-exports so callers can write::

    from deployer import Container, InventoryStore
"""

from deployer.container import Container
from deployer.inventory.store import InventoryStore

__all__ = ["Container", "InventoryStore"]
