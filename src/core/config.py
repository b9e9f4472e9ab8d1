"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP/shell) read paths, credentials and timeouts consistently.

The VM provisioning scripts already export a few un-prefixed variables
(`USE_POSTGRES`, `GO_VERSION`, `EXTENSIONS_USER`, ...). Those stay accepted as
aliases next to the `GOCD_PROVISION_` prefixed names.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env(name: str, *legacy: str) -> AliasChoices:
    return AliasChoices(f"GOCD_PROVISION_{name}", *legacy)


class AppSettings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOCD_PROVISION_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    # Server
    server_url: str = Field(
        default="http://localhost:8153/go",
        min_length=8,
        description="Base URL of the GoCD server (including the `/go` context).",
    )
    admin_username: str = Field(
        default="admin",
        min_length=1,
        description="Basic auth user for API calls and the password-file plugin.",
    )
    admin_password: str = Field(
        default="badger",
        min_length=1,
        description="Basic auth password for API calls and the password-file plugin.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="gocd-provision/0.1",
        min_length=1,
        description="User-Agent for API requests.",
    )

    # Waits
    poll_interval_seconds: float = Field(default=5.0, gt=0)
    server_start_timeout_seconds: float = Field(default=120.0, gt=0)
    postgres_start_timeout_seconds: float = Field(default=120.0, gt=0)
    agent_start_timeout_seconds: float = Field(default=180.0, gt=0)
    pipeline_timeout_seconds: float = Field(default=180.0, gt=0)

    # PostgreSQL addon
    use_postgres: bool = Field(
        default=False,
        validation_alias=_env("USE_POSTGRES", "USE_POSTGRES"),
        description="Swap the embedded database for the PostgreSQL addon.",
    )
    go_version: str | None = Field(
        default=None,
        validation_alias=_env("GO_VERSION", "GO_VERSION"),
        description="Full GoCD version under test (`<version>-<build>`), used to pick the addon jar.",
    )
    addons_source_dir: Path = Field(default=Path("/vagrant/addons"))
    addon_builds_file: Path = Field(default=Path("/vagrant/addons/addon_builds.json"))
    server_addons_dir: Path = Field(default=Path("/var/lib/go-server/addons"))
    postgres_properties_file: Path = Field(default=Path("/etc/go/postgresqldb.properties"))
    server_defaults_file: Path = Field(default=Path("/etc/default/go-server"))
    postgres_host: str = Field(default="localhost")
    postgres_port: int = Field(default=5432, ge=1, le=65535)
    postgres_database: str = Field(default="cruise")
    postgres_user: str = Field(default="postgres")
    postgres_password: str = Field(default="postgres")

    # Host
    server_log_file: Path = Field(default=Path("/var/log/go-server/go-server.log"))
    init_d_dir: Path = Field(default=Path("/etc/init.d"))
    service_user: str = Field(default="go", min_length=1)
    password_file: Path = Field(default=Path("/etc/go/password.properties"))

    # Plugins
    external_plugins_dir: Path = Field(default=Path("/var/lib/go-server/plugins/external"))
    extensions_user: str | None = Field(
        default=None,
        validation_alias=_env("EXTENSIONS_USER", "EXTENSIONS_USER"),
    )
    extensions_password: str | None = Field(
        default=None,
        validation_alias=_env("EXTENSIONS_PASSWORD", "EXTENSIONS_PASSWORD"),
    )
    analytics_plugin_download_url: str | None = Field(
        default=None,
        validation_alias=_env("ANALYTICS_PLUGIN_DOWNLOAD_URL", "ANALYTICS_PLUGIN_DOWNLOAD_URL"),
    )
    ea_plugin_download_url: str | None = Field(
        default=None,
        validation_alias=_env("EA_PLUGIN_DOWNLOAD_URL", "EA_PLUGIN_DOWNLOAD_URL"),
    )
    analytics_plugin_id: str = Field(default="com.thoughtworks.gocd.analytics.enterprise")
    elastic_agents_plugin_id: str = Field(default="com.thoughtworks.gocd.elastic-agent.ecs")
    auth_config_id: str = Field(default="file-auth")

    # Pipeline
    pipeline_name: str = Field(default="up42", min_length=1)
    pipeline_config_file: Path = Field(default=Path("/vagrant/provision/filesystem/pipeline.json"))

    log_level: str = Field(default="INFO", description="Root log level (DEBUG, INFO, ...).")

    @property
    def api_url(self) -> str:
        return self.server_url.rstrip("/")

    @property
    def server_init_script(self) -> str:
        return str(self.init_d_dir / "go-server")

    @property
    def agent_init_script(self) -> str:
        return str(self.init_d_dir / "go-agent")
