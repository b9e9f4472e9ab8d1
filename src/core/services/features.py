"""Optional server features: authorization and external plugins.

Each feature decides from the server version whether it applies, sets itself
up, and can check afterwards that the server reports it as configured.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any

from adapters.go_server import GoServerHost
from adapters.gocd_api import GoCDClient
from core.api_versions import (
    analytics_supported,
    auth_config_media_type,
    authorization_supported,
    elastic_agents_supported,
    plugin_info_media_type,
)
from core.config import AppSettings
from core.domain.version import GoVersion
from core.errors import ProvisionError
from core.interfaces.feature import ServerFeature
from core.services.readiness import ServerReadiness

logger = logging.getLogger(__name__)

PASSWORD_FILE_PLUGIN_ID = "cd.go.authentication.passwordfile"


class Authorization(ServerFeature):
    """Password-file authentication for the admin user."""

    name = "authorization"

    def __init__(
        self,
        version: GoVersion,
        settings: AppSettings,
        client: GoCDClient,
        host: GoServerHost,
    ) -> None:
        self.version = version
        self._settings = settings
        self._client = client
        self._host = host

    def supported(self) -> bool:
        return authorization_supported(self.version)

    def _accept(self) -> str:
        accept = auth_config_media_type(self.version)
        if accept is None:
            raise ProvisionError(f"GoCD {self.version} has no auth config API")
        return accept

    def auth_config(self) -> dict[str, Any]:
        return {
            "id": self._settings.auth_config_id,
            "plugin_id": PASSWORD_FILE_PLUGIN_ID,
            "properties": [
                {"key": "PasswordFilePath", "value": str(self._settings.password_file)},
            ],
        }

    def setup(self) -> None:
        logger.info("Configuring password-file authorization")
        self._host.write_password_file(self._settings.admin_username, self._settings.admin_password)
        self._client.create_auth_config(self.auth_config(), self._accept())

    def validate(self) -> None:
        config = self._client.auth_config(self._settings.auth_config_id, self._accept())
        if config.get("plugin_id") != PASSWORD_FILE_PLUGIN_ID:
            raise ProvisionError(
                f"Auth config {self._settings.auth_config_id} uses plugin "
                f"{config.get('plugin_id')!r}, expected {PASSWORD_FILE_PLUGIN_ID!r}"
            )
        logger.info("Authorization config %s is in place", self._settings.auth_config_id)


class _ExternalPlugin(ServerFeature):
    """A plugin jar downloaded into the external plugins dir."""

    name = "plugin"
    jar_name = ""

    def __init__(
        self,
        version: GoVersion,
        settings: AppSettings,
        client: GoCDClient,
        host: GoServerHost,
        readiness: ServerReadiness,
    ) -> None:
        self.version = version
        self._settings = settings
        self._client = client
        self._host = host
        self._readiness = readiness

    @property
    @abstractmethod
    def download_url(self) -> str | None:
        ...

    @property
    @abstractmethod
    def plugin_id(self) -> str:
        ...

    @abstractmethod
    def _version_supported(self) -> bool:
        ...

    def supported(self) -> bool:
        return self._version_supported() and bool(self.download_url)

    def setup(self) -> None:
        logger.info("Installing %s plugin", self.name)
        self._host.install_plugin(self.download_url, self.jar_name)
        self._host.restart_server()
        self._readiness.service_status()

    def validate(self) -> None:
        accept = plugin_info_media_type(self.version)
        if accept is None:
            raise ProvisionError(f"GoCD {self.version} has no plugin info API")
        info = self._client.plugin_info(self.plugin_id, accept)
        status = info.get("status")
        state = status.get("state") if isinstance(status, dict) else status
        if state != "active":
            raise ProvisionError(f"Plugin {self.plugin_id} is not active (status: {status!r})")
        logger.info("Plugin %s is active", self.plugin_id)


class ElasticAgents(_ExternalPlugin):
    name = "elastic-agents"
    jar_name = "ecs-elastic-agents-plugin.jar"

    @property
    def download_url(self) -> str | None:
        return self._settings.ea_plugin_download_url

    @property
    def plugin_id(self) -> str:
        return self._settings.elastic_agents_plugin_id

    def _version_supported(self) -> bool:
        return elastic_agents_supported(self.version)


class Analytics(_ExternalPlugin):
    name = "analytics"
    jar_name = "analytics-plugin.jar"

    @property
    def download_url(self) -> str | None:
        return self._settings.analytics_plugin_download_url

    @property
    def plugin_id(self) -> str:
        return self._settings.analytics_plugin_id

    def _version_supported(self) -> bool:
        return analytics_supported(self.version)
