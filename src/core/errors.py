"""Provisioning errors.

Only failures the harness itself detects live here. Shell failures surface as
`subprocess.CalledProcessError` and HTTP status failures as
`httpx.HTTPStatusError`, unchanged.
"""

from __future__ import annotations

from typing import Any


class ProvisionError(Exception):
    """Base error for the provisioning harness."""


class ConfigurationError(ProvisionError):
    """A setting required by the requested step is missing."""


class AddonNotFound(ProvisionError):
    """No PostgreSQL addon jar is catalogued for a GoCD version."""

    def __init__(self, core_version: str) -> None:
        super().__init__(f"No postgresql addon catalogued for GoCD {core_version}")
        self.core_version = core_version


class ReadinessTimeout(ProvisionError):
    """A wait window expired before its condition became true."""

    def __init__(self, description: str, timeout: float, last_observed: Any = None) -> None:
        message = f"Timed out after {timeout:g}s waiting for {description}"
        if last_observed is not None:
            message += f". Last observed: {last_observed}"
        super().__init__(message)
        self.description = description
        self.timeout = timeout
        self.last_observed = last_observed
