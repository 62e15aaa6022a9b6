"""Dot-path addressed key/value store over a single YAML document.

Usage::

    store = InventoryStore(FilesystemService())
    store.set("servers.web1", {"host": "10.0.0.1", "port": 22})
    store.get("servers.web1.host")          # "10.0.0.1"
    store.get("servers.web2.host", "n/a")   # "n/a"

Every operation re-reads the file, and every mutation rewrites the whole
document.  There is no locking: two processes writing the same inventory
concurrently can lose an update (last writer wins).

Paths are split on ``.`` with no escaping, so keys containing a literal dot
cannot be addressed below the top level.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from deployer.config import settings
from deployer.errors import ParseError, StorageError
from deployer.services.filesystem import FilesystemService

__all__ = ["InventoryStore", "SEPARATOR"]

log = structlog.get_logger(__name__)

SEPARATOR = "."


class InventoryStore:
    """Read-through, write-through access to the inventory YAML file."""

    def __init__(self, filesystem: FilesystemService, path: Optional[Path] = None) -> None:
        self._filesystem = filesystem
        self.path = Path(path) if path is not None else settings.inventory_path

    # ------------------------------------------------------------------
    # Document IO
    # ------------------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """Read and parse the inventory file.

        Returns:
            The whole document.  A missing or empty file, or one whose top
            level is not a mapping, yields an empty dict.

        Raises:
            ParseError: The file exists but is not valid UTF-8 YAML.
            StorageError: The file exists but cannot be read.
        """
        if not self._filesystem.exists(self.path):
            return {}

        try:
            raw = self._filesystem.read_text(self.path)
        except OSError as exc:
            raise StorageError(
                f"Failed to read inventory file at {self.path}: {exc}", str(self.path)
            ) from exc
        except UnicodeDecodeError as exc:
            raise ParseError(
                f"Inventory file at {self.path} is not valid UTF-8: {exc}", str(self.path)
            ) from exc

        try:
            parsed = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ParseError(
                f"Inventory file at {self.path} is not valid YAML: {exc}", str(self.path)
            ) from exc

        return parsed if isinstance(parsed, dict) else {}

    def _write(self, document: dict[str, Any]) -> None:
        directory = self.path.parent
        if not self._filesystem.exists(directory):
            try:
                self._filesystem.mkdir(directory)
            except OSError as exc:
                raise StorageError(
                    f"Unable to create inventory directory: {directory}", str(directory)
                ) from exc

        try:
            content = yaml.safe_dump(
                document,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                indent=2,
            )
        except yaml.YAMLError as exc:
            raise StorageError(
                f"Failed to serialize inventory for {self.path}: {exc}", str(self.path)
            ) from exc

        try:
            self._filesystem.write_text(self.path, content)
        except OSError as exc:
            raise StorageError(
                f"Failed to write inventory file at {self.path}", str(self.path)
            ) from exc

        log.debug("inventory_written", path=str(self.path), keys=list(document))

    # ------------------------------------------------------------------
    # Path operations
    # ------------------------------------------------------------------

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value at ``path``, or ``default`` if any segment is missing."""
        found, value = _lookup(self.load(), _segments(path))
        return value if found else default

    def has(self, path: str) -> bool:
        """Return True if ``path`` exists, even when its value is ``None``."""
        found, _ = _lookup(self.load(), _segments(path))
        return found

    def set(self, path: str, value: Any) -> None:
        """Assign ``value`` at ``path`` and persist the document.

        Missing intermediate mappings are created.  An intermediate node that
        is not a mapping is replaced by an empty one.
        """
        *parents, leaf = _segments(path)
        document = self.load()

        node = document
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child

        node[leaf] = value
        self._write(document)

    def delete(self, path: str) -> None:
        """Remove the key at ``path`` and persist the document.

        Deleting a path that does not exist does nothing (nothing is written).
        Parent mappings are left in place even when they become empty.
        """
        *parents, leaf = _segments(path)
        document = self.load()

        found, parent = _lookup(document, parents)
        if not found or not isinstance(parent, dict) or leaf not in parent:
            return

        del parent[leaf]
        self._write(document)

    # ------------------------------------------------------------------
    # Collection helpers
    # ------------------------------------------------------------------

    def all(self) -> dict[str, Any]:
        """Return the entire inventory document."""
        return self.load()

    def list(self, collection: str) -> dict[str, Any]:
        """Return the mapping stored under a top-level key, or an empty dict."""
        records = self.get(collection, {})
        return records if isinstance(records, dict) else {}


def _segments(path: str) -> list[str]:
    segments = path.split(SEPARATOR)
    if not all(segments):
        raise ValueError(f"Invalid inventory path: {path!r}")
    return segments


def _lookup(document: dict[str, Any], segments: list[str]) -> tuple[bool, Any]:
    node: Any = document
    for segment in segments:
        if not isinstance(node, dict) or segment not in node:
            return False, None
        node = node[segment]
    return True, node
