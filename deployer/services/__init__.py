"""Thin service wrappers over the filesystem, subprocesses, git and SSH.

Public re-exports so callers can write::

    from deployer.services import FilesystemService, SSHService
"""

from deployer.services.filesystem import FilesystemService
from deployer.services.git import GitService
from deployer.services.process import ProcessResult, ProcessService
from deployer.services.ssh import SSHService
from deployer.services.version import VersionService

__all__ = [
    "FilesystemService",
    "GitService",
    "ProcessResult",
    "ProcessService",
    "SSHService",
    "VersionService",
]
