"""SSH connectivity checks backed by paramiko.

Usage::

    ssh = SSHService(FilesystemService())
    ssh.assert_can_connect("example.com", 22, "deployer")
    ssh.assert_can_connect("example.com", 22, "deployer", "~/.ssh/custom_key")

Connections are opened and closed per call; nothing is kept alive.
"""

from __future__ import annotations

import os
import socket
from typing import Optional

import paramiko
import structlog

from deployer.config import settings
from deployer.errors import SSHConnectionError
from deployer.services.filesystem import FilesystemService

log = structlog.get_logger(__name__)

DEFAULT_KEY_NAMES = ("id_ed25519", "id_rsa")


class SSHService:
    def __init__(self, filesystem: FilesystemService) -> None:
        self._filesystem = filesystem

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assert_can_connect(
        self,
        host: str,
        port: int,
        username: str,
        private_key_path: Optional[str] = None,
    ) -> None:
        """Open and authenticate an SSH session, then close it.

        Raises:
            SSHConnectionError: No usable private key, the host cannot be
                reached, or authentication fails.
        """
        key_path = self.resolve_private_key_path(private_key_path)
        if key_path is None:
            raise SSHConnectionError(
                "No SSH private key found. Provide a key path or place a key at "
                "~/.ssh/id_ed25519 or ~/.ssh/id_rsa"
            )

        client = self._create_client()
        try:
            client.connect(
                hostname=host,
                port=port,
                username=username,
                key_filename=key_path,
                timeout=settings.ssh_timeout,
                banner_timeout=settings.ssh_timeout,
                auth_timeout=settings.ssh_timeout,
                allow_agent=False,
                look_for_keys=False,
            )
        except paramiko.AuthenticationException as exc:
            log.debug("ssh_auth_failed", host=host, port=port, username=username)
            raise SSHConnectionError(
                f"SSH authentication failed for {username}@{host}. "
                "Check username and key permissions"
            ) from exc
        except (paramiko.SSHException, socket.error) as exc:
            log.debug("ssh_connect_failed", host=host, port=port, error=str(exc))
            raise SSHConnectionError(
                f"Error initiating SSH connection to {host}:{port}: {exc}"
            ) from exc
        finally:
            client.close()

        log.info("ssh_connect_ok", host=host, port=port, username=username)

    def resolve_private_key_path(self, path: Optional[str] = None) -> Optional[str]:
        """Return the first existing key path.

        Priority order:
        1. ``path`` (with ``~`` expanded)
        2. ``~/.ssh/id_ed25519``
        3. ``~/.ssh/id_rsa``
        """
        candidates = []
        if path:
            candidates.append(os.path.expanduser(path))

        home = os.path.expanduser("~")
        if home != "~":
            candidates.extend(os.path.join(home, ".ssh", name) for name in DEFAULT_KEY_NAMES)

        for candidate in candidates:
            if self._filesystem.exists(candidate):
                return candidate
        return None

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------

    def _create_client(self) -> paramiko.SSHClient:
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        # Unknown hosts are accepted with a logged warning
        client.set_missing_host_key_policy(paramiko.WarningPolicy())
        return client
