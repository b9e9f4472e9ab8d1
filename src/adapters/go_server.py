"""Host-side operations on the GoCD VM.

Everything here shells out: init.d scripts, file copies as the `go` user,
appends to properties files and plugin downloads with curl.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import shlex

from adapters.addons import addon_for, load_addon_builds
from core.config import AppSettings
from core.errors import ConfigurationError
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)

POSTGRES_PROVIDER = "com.thoughtworks.go.postgresql.PostgresqlDatabase"


def sha_password_entry(username: str, password: str) -> str:
    """`user:{SHA}<base64 sha1>` line understood by the password-file plugin."""

    digest = hashlib.sha1(password.encode("utf-8")).digest()  # nosec - format required by the plugin
    return f"{username}:{{SHA}}{base64.b64encode(digest).decode('ascii')}"


class GoServerHost:
    """Service control and file layout of a packaged GoCD install."""

    def __init__(self, settings: AppSettings, runner: CommandRunner) -> None:
        self._settings = settings
        self._runner = runner

    def stop_server(self) -> None:
        self._runner.run(f"{self._settings.server_init_script} stop 2>/dev/null || true")

    def restart_server(self) -> None:
        self._runner.run(f"{self._settings.server_init_script} restart")

    def start_agent(self) -> None:
        self._runner.run(f"{self._settings.agent_init_script} start")

    def postgres_addon_jar(self, core_version: str) -> str:
        return addon_for(core_version, load_addon_builds(self._settings.addon_builds_file))

    def _install_addon_jar(self, jar: str) -> None:
        s = self._settings
        addons_dir = shlex.quote(str(s.server_addons_dir))
        source = shlex.quote(str(s.addons_source_dir / jar))
        self._runner.run_as(
            s.service_user,
            f"mkdir -p {addons_dir} ; rm -rf {addons_dir}/*.jar ; cp {source} {addons_dir}/",
        )

    def setup_postgres_addon(self, core_version: str) -> str:
        """Switch a stopped server to the PostgreSQL addon; returns the jar installed."""

        s = self._settings
        logger.info("Setting up postgres addon for GoCD %s", core_version)
        jar = self.postgres_addon_jar(core_version)
        self.stop_server()

        self._runner.run(
            "echo GO_SERVER_SYSTEM_PROPERTIES=\\\"\\$GO_SERVER_SYSTEM_PROPERTIES "
            f"-Dgo.database.provider={POSTGRES_PROVIDER}\\\" >> {shlex.quote(str(s.server_defaults_file))}"
        )
        self._install_addon_jar(jar)

        properties = {
            "db.host": s.postgres_host,
            "db.port": str(s.postgres_port),
            "db.name": s.postgres_database,
            "db.user": s.postgres_user,
            "db.password": s.postgres_password,
        }
        target = shlex.quote(str(s.postgres_properties_file))
        for key, value in properties.items():
            shown = "***" if key == "db.password" else value
            self._runner.run_as(
                s.service_user,
                f"echo {shlex.quote(f'{key}={value}')} >> {target}",
                display=f"echo {shlex.quote(f'{key}={shown}')} >> {target}",
            )
        return jar

    def change_postgres_addons_jar(self, core_version: str | None = None) -> str | None:
        """Swap in the addon jar matching `core_version` and restart; no-op without postgres."""

        if not self._settings.use_postgres:
            return None
        core_version = core_version or self._settings.go_version
        if not core_version:
            raise ConfigurationError("GO_VERSION is required to pick the postgres addon jar")
        jar = self.postgres_addon_jar(core_version)
        self._install_addon_jar(jar)
        self.restart_server()
        return jar

    def install_plugin(self, url: str | None, filename: str) -> str:
        """Download a plugin jar into the external plugins dir; returns its path."""

        s = self._settings
        if not url:
            raise ConfigurationError(f"No download URL configured for {filename}")
        destination = str(s.external_plugins_dir / filename)
        credentials = f"{s.extensions_user or ''}:{s.extensions_password or ''}"

        def curl(user: str) -> str:
            return (
                f"curl -L -o {shlex.quote(destination)} --fail "
                f"-H 'Accept: binary/octet-stream' --user {shlex.quote(user)} {shlex.quote(url)}"
            )

        self._runner.run(curl(credentials), display=curl(f"{s.extensions_user or ''}:***"))
        return destination

    def write_password_file(self, username: str, password: str) -> None:
        s = self._settings
        entry = shlex.quote(sha_password_entry(username, password))
        target = shlex.quote(str(s.password_file))
        self._runner.run_as(
            s.service_user,
            f"echo {entry} > {target}",
            display=f"echo {shlex.quote(username + ':{SHA}***')} > {target}",
        )
