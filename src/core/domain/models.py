"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Validates the bits of GoCD JSON we actually read, and ignores the rest.
- Keeps HAL navigation (`_embedded`) out of the services.

Note:
- These models describe *what* the server reports, not *how* it is fetched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.version import GoVersion


class ServerVersion(BaseModel):
    """Payload of `GET /api/version`."""

    model_config = ConfigDict(extra="ignore")

    version: str = Field(
        ...,
        min_length=1,
        description="Release number, e.g. `18.2.0`.",
    )
    build_number: str = Field(
        default="",
        description="Build number of the release, e.g. `6228`.",
    )
    git_sha: str | None = Field(default=None)

    @field_validator("build_number", mode="before")
    @classmethod
    def _build_number_as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def full_version(self) -> str:
        """`<version>-<build>`, the key used by the addon catalogue."""

        if not self.build_number:
            return self.version
        return f"{self.version}-{self.build_number}"

    @property
    def go_version(self) -> GoVersion:
        return GoVersion.parse(self.version)


class Agent(BaseModel):
    """One entry of `_embedded.agents`."""

    model_config = ConfigDict(extra="ignore")

    uuid: str = Field(default="")
    hostname: str = Field(default="")
    agent_state: str = Field(
        default="Unknown",
        description="Idle, Building, LostContact, Missing, Unknown...",
    )

    @property
    def is_idle(self) -> bool:
        return self.agent_state == "Idle"


class AddonBuild(BaseModel):
    """One entry of `addon_builds.json`."""

    model_config = ConfigDict(extra="ignore")

    gocd_version: str = Field(
        ...,
        min_length=1,
        description="Full GoCD version (`<version>-<build>`) the addons were built for.",
    )
    addons: dict[str, str] = Field(
        default_factory=dict,
        description="Addon name -> jar file name (e.g. `postgresql`).",
    )


class ProvisionReport(BaseModel):
    """Outcome of a full provisioning run."""

    server_version: str = Field(..., description="Full server version under test.")
    features_applied: list[str] = Field(default_factory=list)
    features_skipped: list[str] = Field(default_factory=list)
    pipeline_name: str = Field(...)
    pipeline_passed: bool = Field(default=False)


def first_stage_status(dashboard: dict[str, Any]) -> str | None:
    """Status of the first stage of the first pipeline instance on the dashboard.

    Returns None while the dashboard does not (yet) hold an instance.
    """

    try:
        group = dashboard["_embedded"]["pipeline_groups"][0]
        pipeline = group["_embedded"]["pipelines"][0]
        instance = pipeline["_embedded"]["instances"][0]
        stage = instance["_embedded"]["stages"][0]
    except (KeyError, IndexError, TypeError):
        return None
    status = stage.get("status") if isinstance(stage, dict) else None
    return status if isinstance(status, str) else None
