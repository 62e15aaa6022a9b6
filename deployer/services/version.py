"""Resolve the running deployer version for the banner and ``--version``."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Optional

from deployer.config import settings
from deployer.services.process import ProcessService

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class VersionService:
    def __init__(
        self,
        proc: ProcessService,
        package_name: str = "deployer-py",
        fallback_version: str = "dev",
    ) -> None:
        self._proc = proc
        self.package_name = package_name
        self.fallback_version = fallback_version

    def get_version(self) -> str:
        """Installed distribution version, else ``git describe``, else the fallback."""
        return (
            self.get_version_from_metadata()
            or self.get_version_from_git()
            or self.fallback_version
        )

    def get_version_from_metadata(self) -> Optional[str]:
        try:
            return metadata.version(self.package_name)
        except metadata.PackageNotFoundError:
            return None

    def get_version_from_git(self, project_root: Optional[Path] = None) -> Optional[str]:
        root = project_root or PROJECT_ROOT
        if not (root / ".git").is_dir():
            return None

        result = self._proc.run(
            ["git", "describe", "--tags", "--always", "--dirty"], root, settings.git_timeout
        )
        if not result.successful:
            return None
        return result.stdout.strip() or None
