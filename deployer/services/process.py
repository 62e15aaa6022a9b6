"""Subprocess runner returning a small result object instead of raising."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def successful(self) -> bool:
        return self.returncode == 0


class ProcessService:
    def run(
        self,
        command: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        timeout: Optional[float] = 3.0,
    ) -> ProcessResult:
        """Run ``command`` and capture its output.

        A missing executable or an expired timeout is reported as a failed
        result (returncode -1) rather than an exception.
        """
        try:
            completed = subprocess.run(
                list(command),
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            log.debug("process_timeout", command=list(command), timeout=timeout)
            return ProcessResult(-1, "", f"Command timed out after {timeout}s")
        except OSError as exc:
            log.debug("process_failed", command=list(command), error=str(exc))
            return ProcessResult(-1, "", str(exc))

        return ProcessResult(completed.returncode, completed.stdout, completed.stderr)
