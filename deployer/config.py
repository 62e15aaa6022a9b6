"""Centralised settings for deployer.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the current
working directory (loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the directory deployer is invoked in
load_dotenv(Path.cwd() / ".env", override=False)


def _optional_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value).expanduser() if value else None


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Inventory storage
    # ------------------------------------------------------------------
    workspace_dir: Optional[Path] = field(
        default_factory=lambda: _optional_path("DEPLOYER_WORKSPACE")
    )

    @property
    def inventory_dir(self) -> Path:
        """Directory holding the inventory file.

        Resolved at call time so that a change of working directory is
        picked up when ``DEPLOYER_WORKSPACE`` is not set.
        """
        return self.workspace_dir or Path.cwd() / ".deployer"

    @property
    def inventory_path(self) -> Path:
        """Absolute path to the YAML inventory file."""
        return self.inventory_dir / "inventory.yml"

    # ------------------------------------------------------------------
    # External commands
    # ------------------------------------------------------------------
    ssh_timeout: float = field(
        default_factory=lambda: float(os.environ.get("DEPLOYER_SSH_TIMEOUT", "10.0"))
    )
    git_timeout: float = field(
        default_factory=lambda: float(os.environ.get("DEPLOYER_GIT_TIMEOUT", "2.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("DEPLOYER_LOG_LEVEL", "WARNING")
    )
    log_format: str = field(
        default_factory=lambda: os.environ.get("DEPLOYER_LOG_FORMAT", "console")
    )


# Module-level singleton; import this everywhere:
#   from deployer.config import settings
settings = Settings()
