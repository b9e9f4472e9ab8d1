"""Contract for running host commands."""

from __future__ import annotations

import subprocess
from typing import Protocol, runtime_checkable


@runtime_checkable
class CommandRunner(Protocol):
    """Runs shell commands on the VM.

    Rules:
    - Failures raise `subprocess.CalledProcessError`; no retries.
    - `run_as` runs the command through a login shell of another user.
    - `display` replaces the command in logs when it carries secrets.
    """

    def run(self, command: str, *, display: str | None = None) -> subprocess.CompletedProcess[str]:
        ...

    def run_as(
        self,
        user: str,
        command: str,
        *,
        display: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        ...
