"""Git introspection used to pre-fill site prompts."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from deployer.config import settings
from deployer.services.process import ProcessService


class GitService:
    def __init__(self, proc: ProcessService) -> None:
        self._proc = proc

    def detect_remote_url(self, cwd: Optional[Union[str, Path]] = None) -> Optional[str]:
        """Return ``remote.origin.url`` of the repository at ``cwd``, if any."""
        return self._git_output(["config", "--get", "remote.origin.url"], cwd)

    def detect_current_branch(self, cwd: Optional[Union[str, Path]] = None) -> Optional[str]:
        """Return the checked-out branch name of the repository at ``cwd``, if any."""
        return self._git_output(["rev-parse", "--abbrev-ref", "HEAD"], cwd)

    def _git_output(self, args: list[str], cwd: Optional[Union[str, Path]]) -> Optional[str]:
        result = self._proc.run(["git", *args], cwd or Path.cwd(), settings.git_timeout)
        if not result.successful:
            return None
        return result.stdout.strip() or None
