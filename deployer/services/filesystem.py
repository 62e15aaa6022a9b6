"""Filesystem primitives used by the inventory store and SSH key lookup.

Kept as a class so the container can inject it and tests can swap in an
in-memory fake.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class FilesystemService:
    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def read_text(self, path: PathLike) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: PathLike, content: str) -> None:
        Path(path).write_text(content, encoding="utf-8")

    def mkdir(self, path: PathLike, mode: int = 0o775) -> None:
        """Create ``path`` and any missing parents (no error if it exists)."""
        Path(path).mkdir(mode=mode, parents=True, exist_ok=True)
