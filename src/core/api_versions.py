"""Media types accepted by the GoCD API, per server version.

GoCD versions its REST resources through the `Accept` header. Each resolver
below walks its tiers from the newest threshold down; the first threshold the
server version reaches (boundary-inclusive) wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.domain.version import GoVersion

V1 = "application/vnd.go.cd.v1+json"
V2 = "application/vnd.go.cd.v2+json"
V3 = "application/vnd.go.cd.v3+json"
V4 = "application/vnd.go.cd.v4+json"
V5 = "application/vnd.go.cd.v5+json"
V6 = "application/vnd.go.cd.v6+json"
TEXT_PLAIN = "text/plain"

Tiers = Sequence[tuple[str, str]]


def _resolve(version: GoVersion, tiers: Tiers, default: str | None) -> str | None:
    for threshold, media_type in tiers:
        if version >= GoVersion.parse(threshold):
            return media_type
    return default


_AGENTS: Tiers = (("16.10.0", V4),)
_PIPELINE: Tiers = (
    ("17.12.0", V5),
    ("17.4.0", V4),
    ("16.10.0", V3),
    ("16.7.0", V2),
)
_PAUSE: Tiers = (("18.2.0", V1),)
_SCHEDULE: Tiers = (("18.2.0", V1),)
_DASHBOARD: Tiers = (("15.3.0", V1),)
_AUTH_CONFIG: Tiers = (("17.5.0", V1),)
_PLUGIN_INFO: Tiers = (
    ("18.2.0", V4),
    ("17.9.0", V3),
    ("16.12.0", V2),
    ("16.7.0", V1),
)

AUTHORIZATION_SINCE = GoVersion.parse("17.5.0")
ELASTIC_AGENTS_SINCE = GoVersion.parse("18.2.0")
ANALYTICS_SINCE = GoVersion.parse("18.2.0")


def version_media_type(version: GoVersion | None = None) -> str:
    return V1


def agents_media_type(version: GoVersion) -> str:
    return _resolve(version, _AGENTS, V3)  # type: ignore[return-value]


def pipeline_media_type(version: GoVersion) -> str:
    return _resolve(version, _PIPELINE, V1)  # type: ignore[return-value]


def pause_media_type(version: GoVersion) -> str:
    return _resolve(version, _PAUSE, TEXT_PLAIN)  # type: ignore[return-value]


def schedule_media_type(version: GoVersion) -> str:
    return _resolve(version, _SCHEDULE, TEXT_PLAIN)  # type: ignore[return-value]


def dashboard_media_type(version: GoVersion) -> str | None:
    """None before 15.3.0: the dashboard API does not exist there."""

    return _resolve(version, _DASHBOARD, None)


def auth_config_media_type(version: GoVersion) -> str | None:
    return _resolve(version, _AUTH_CONFIG, None)


def plugin_info_media_type(version: GoVersion) -> str | None:
    return _resolve(version, _PLUGIN_INFO, None)


def authorization_supported(version: GoVersion) -> bool:
    return version >= AUTHORIZATION_SINCE


def elastic_agents_supported(version: GoVersion) -> bool:
    return version >= ELASTIC_AGENTS_SINCE


def analytics_supported(version: GoVersion) -> bool:
    return version >= ANALYTICS_SINCE


@dataclass(frozen=True)
class MediaTypes:
    """Every resolved media type for one server version."""

    version: GoVersion
    agents: str
    pipeline: str
    pause: str
    schedule: str
    dashboard: str | None
    auth_config: str | None
    plugin_info: str | None

    @classmethod
    def for_version(cls, version: GoVersion) -> "MediaTypes":
        return cls(
            version=version,
            agents=agents_media_type(version),
            pipeline=pipeline_media_type(version),
            pause=pause_media_type(version),
            schedule=schedule_media_type(version),
            dashboard=dashboard_media_type(version),
            auth_config=auth_config_media_type(version),
            plugin_info=plugin_info_media_type(version),
        )

    def as_rows(self) -> list[tuple[str, str]]:
        return [
            ("agents", self.agents),
            ("pipeline", self.pipeline),
            ("pause", self.pause),
            ("schedule", self.schedule),
            ("dashboard", self.dashboard or "-"),
            ("auth_config", self.auth_config or "-"),
            ("plugin_info", self.plugin_info or "-"),
        ]
