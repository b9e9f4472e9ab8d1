"""Shell command runner backed by `subprocess`."""

from __future__ import annotations

import logging
import shlex
import subprocess

from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)


def su_command(user: str, command: str) -> str:
    return f"su - {shlex.quote(user)} bash -c {shlex.quote(command)}"


class ShellRunner(CommandRunner):
    """Runs commands through `/bin/sh`, failing fast on a non-zero exit."""

    def run(self, command: str, *, display: str | None = None) -> subprocess.CompletedProcess[str]:
        logger.info("$ %s", display or command)
        try:
            result = subprocess.run(
                command,
                shell=True,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as exc:
            logger.error(
                "Command failed with exit status %s: %s",
                exc.returncode,
                (exc.stderr or "").strip() or "(no stderr)",
            )
            raise
        if result.stdout.strip():
            logger.debug(result.stdout.rstrip())
        return result

    def run_as(
        self,
        user: str,
        command: str,
        *,
        display: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        return self.run(
            su_command(user, command),
            display=su_command(user, display) if display else None,
        )
