"""Tests for the process, git, SSH and version services."""

from __future__ import annotations

import os
import socket
import sys
from pathlib import Path

import paramiko
import pytest

from deployer.container import Container
from deployer.errors import SSHConnectionError
from deployer.services import (
    FilesystemService,
    GitService,
    ProcessResult,
    ProcessService,
    SSHService,
    VersionService,
)


class MockFilesystem(FilesystemService):
    """In-memory filesystem: only paths in ``files`` exist."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})

    def exists(self, path) -> bool:
        return str(path) in self.files

    def read_text(self, path) -> str:
        return self.files[str(path)]

    def write_text(self, path, content) -> None:
        self.files[str(path)] = content

    def mkdir(self, path, mode=0o775) -> None:
        self.files[str(path)] = ""


class FakeProcessService(ProcessService):
    """Returns canned results keyed by the command tuple."""

    def __init__(self, results: dict[tuple[str, ...], ProcessResult] | None = None):
        self.results = results or {}
        self.calls: list[tuple[tuple[str, ...], object, object]] = []

    def run(self, command, cwd=None, timeout=3.0) -> ProcessResult:
        self.calls.append((tuple(command), cwd, timeout))
        return self.results.get(tuple(command), ProcessResult(128, "", "fatal: not a git repository"))


class FakeSSHClient:
    """Stands in for paramiko.SSHClient; behaviour set per test."""

    connect_error: Exception | None = None
    instances: list[FakeSSHClient] = []

    def __init__(self) -> None:
        self.connect_kwargs: dict = {}
        self.closed = False
        FakeSSHClient.instances.append(self)

    def load_system_host_keys(self) -> None:
        pass

    def set_missing_host_key_policy(self, policy) -> None:
        self.policy = policy

    def connect(self, **kwargs) -> None:
        self.connect_kwargs = kwargs
        if FakeSSHClient.connect_error is not None:
            raise FakeSSHClient.connect_error

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_ssh_client(monkeypatch):
    FakeSSHClient.connect_error = None
    FakeSSHClient.instances = []
    monkeypatch.setattr(paramiko, "SSHClient", FakeSSHClient)
    return FakeSSHClient


@pytest.fixture()
def home(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


# ---------------------------------------------------------------------------
# ProcessService
# ---------------------------------------------------------------------------

class TestProcessService:
    def test_captures_output(self) -> None:
        result = ProcessService().run([sys.executable, "-c", "print('hello')"])
        assert result.successful
        assert result.stdout.strip() == "hello"

    def test_nonzero_exit(self) -> None:
        result = ProcessService().run([sys.executable, "-c", "import sys; sys.exit(3)"])
        assert not result.successful
        assert result.returncode == 3

    def test_missing_executable(self) -> None:
        result = ProcessService().run(["definitely-not-a-real-binary-xyz"])
        assert result.returncode == -1
        assert not result.successful

    def test_timeout(self) -> None:
        result = ProcessService().run(
            [sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2
        )
        assert result.returncode == -1
        assert "timed out" in result.stderr


# ---------------------------------------------------------------------------
# GitService
# ---------------------------------------------------------------------------

class TestGitService:
    def test_detects_remote_and_branch(self, tmp_path: Path) -> None:
        proc = FakeProcessService({
            ("git", "config", "--get", "remote.origin.url"): ProcessResult(0, "git@github.com:me/app.git\n", ""),
            ("git", "rev-parse", "--abbrev-ref", "HEAD"): ProcessResult(0, "develop\n", ""),
        })
        git = GitService(proc)

        assert git.detect_remote_url(tmp_path) == "git@github.com:me/app.git"
        assert git.detect_current_branch(tmp_path) == "develop"
        assert proc.calls[0][1] == tmp_path

    def test_returns_none_outside_repository(self, tmp_path: Path) -> None:
        git = GitService(FakeProcessService())
        assert git.detect_remote_url(tmp_path) is None
        assert git.detect_current_branch(tmp_path) is None

    def test_blank_output_is_none(self, tmp_path: Path) -> None:
        proc = FakeProcessService({
            ("git", "config", "--get", "remote.origin.url"): ProcessResult(0, "  \n", ""),
        })
        assert GitService(proc).detect_remote_url(tmp_path) is None


# ---------------------------------------------------------------------------
# SSHService
# ---------------------------------------------------------------------------

class TestSSHKeyResolution:
    def test_explicit_path_wins(self, home: Path) -> None:
        key = str(home / "custom_key")
        fs = MockFilesystem({key: "", str(home / ".ssh" / "id_ed25519"): ""})
        assert SSHService(fs).resolve_private_key_path(key) == key

    def test_expands_tilde(self, home: Path) -> None:
        fs = MockFilesystem({str(home / "keys" / "deploy"): ""})
        assert SSHService(fs).resolve_private_key_path("~/keys/deploy") == str(home / "keys" / "deploy")

    def test_falls_back_to_ed25519_then_rsa(self, home: Path) -> None:
        ed25519 = os.path.join(str(home), ".ssh", "id_ed25519")
        rsa = os.path.join(str(home), ".ssh", "id_rsa")

        assert SSHService(MockFilesystem({ed25519: "", rsa: ""})).resolve_private_key_path() == ed25519
        assert SSHService(MockFilesystem({rsa: ""})).resolve_private_key_path() == rsa
        assert SSHService(MockFilesystem({rsa: ""})).resolve_private_key_path("/missing") == rsa

    def test_no_key(self, home: Path) -> None:
        assert SSHService(MockFilesystem()).resolve_private_key_path() is None


class TestSSHConnect:
    def test_successful_connection(self, home: Path, fake_ssh_client) -> None:
        key = os.path.join(str(home), ".ssh", "id_ed25519")
        SSHService(MockFilesystem({key: ""})).assert_can_connect("10.0.0.1", 2222, "deployer")

        client = fake_ssh_client.instances[-1]
        assert client.connect_kwargs["hostname"] == "10.0.0.1"
        assert client.connect_kwargs["port"] == 2222
        assert client.connect_kwargs["username"] == "deployer"
        assert client.connect_kwargs["key_filename"] == key
        assert client.connect_kwargs["look_for_keys"] is False
        assert client.closed

    def test_missing_key(self, home: Path, fake_ssh_client) -> None:
        with pytest.raises(SSHConnectionError, match="No SSH private key found"):
            SSHService(MockFilesystem()).assert_can_connect("10.0.0.1", 22, "root")
        assert fake_ssh_client.instances == []

    @pytest.mark.parametrize(
        "raised, message",
        [
            (paramiko.AuthenticationException("denied"), "SSH authentication failed for root@10.0.0.1"),
            (paramiko.SSHException("banner"), "Error initiating SSH connection to 10.0.0.1:22"),
            (socket.timeout("timed out"), "Error initiating SSH connection to 10.0.0.1:22"),
            (ConnectionRefusedError("refused"), "Error initiating SSH connection"),
        ],
    )
    def test_failures_are_wrapped_and_client_closed(
        self, home: Path, fake_ssh_client, raised: Exception, message: str
    ) -> None:
        key = os.path.join(str(home), ".ssh", "id_rsa")
        fake_ssh_client.connect_error = raised

        with pytest.raises(SSHConnectionError, match=message):
            SSHService(MockFilesystem({key: ""})).assert_can_connect("10.0.0.1", 22, "root")
        assert fake_ssh_client.instances[-1].closed


# ---------------------------------------------------------------------------
# VersionService
# ---------------------------------------------------------------------------

class TestVersionService:
    def test_defaults_are_autowired(self) -> None:
        service = Container().build(VersionService)
        assert service.package_name == "deployer-py"
        assert service.fallback_version == "dev"

    def test_prefers_metadata(self, monkeypatch) -> None:
        service = VersionService(FakeProcessService())
        monkeypatch.setattr(service, "get_version_from_metadata", lambda: "1.2.3")
        assert service.get_version() == "1.2.3"

    def test_falls_back_to_git(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        proc = FakeProcessService({
            ("git", "describe", "--tags", "--always", "--dirty"): ProcessResult(0, "v0.3.0-2-gabc123\n", ""),
        })
        service = VersionService(proc, package_name="no-such-distribution-xyz")
        assert service.get_version_from_metadata() is None
        assert service.get_version_from_git(tmp_path) == "v0.3.0-2-gabc123"

    def test_final_fallback(self, monkeypatch) -> None:
        service = VersionService(FakeProcessService(), package_name="no-such-distribution-xyz")
        monkeypatch.setattr(service, "get_version_from_git", lambda: None)
        assert service.get_version() == "dev"
