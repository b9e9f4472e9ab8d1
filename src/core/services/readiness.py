"""Server and agent readiness checks."""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from adapters.gocd_api import GoCDClient
from core.api_versions import agents_media_type
from core.config import AppSettings
from core.domain.version import GoVersion
from core.services.polling import NOT_READY_ERRORS, wait_until

logger = logging.getLogger(__name__)


def postgres_connected_line(settings: AppSettings) -> str:
    """Line the server logs once it talks to the configured PostgreSQL database."""

    return (
        "Using connection configuration "
        f"jdbc:postgresql://{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_database} "
        f"[User: {settings.postgres_user}] [Password Encrypted: false]"
    )


class ServerReadiness:
    """Waits for the server, its database and an idle agent."""

    def __init__(
        self,
        settings: AppSettings,
        client: GoCDClient,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._client = client
        self._sleep = sleep
        self._clock = clock
        self._version: GoVersion | None = None

    def _wait(self, check, *, timeout: float, description: str, ignore=NOT_READY_ERRORS):
        return wait_until(
            check,
            timeout=timeout,
            interval=self._settings.poll_interval_seconds,
            description=description,
            ignore=ignore,
            sleep=self._sleep,
            clock=self._clock,
        )

    def current_version(self, refresh: bool = False) -> GoVersion:
        if self._version is None or refresh:
            self._version = self._client.version().go_version
        return self._version

    def server_running(self) -> bool:
        try:
            return self._client.ping()
        except httpx.HTTPError:
            return False

    def wait_to_start(self) -> None:
        logger.info("Waiting for the server to come up")
        self._wait(
            self.server_running,
            timeout=self._settings.server_start_timeout_seconds,
            description="the GoCD server to answer on /auth/login",
        )
        logger.info("Server is up")

    def _postgres_connected(self) -> bool:
        expected = postgres_connected_line(self._settings)
        with self._settings.server_log_file.open(encoding="utf-8", errors="replace") as log:
            return any(expected in line for line in log)

    def wait_for_postgres(self) -> None:
        if not self._settings.use_postgres:
            return
        self._wait(
            self._postgres_connected,
            timeout=self._settings.postgres_start_timeout_seconds,
            description="the server to connect to postgres",
            ignore=NOT_READY_ERRORS + (FileNotFoundError,),
        )
        logger.info("Server up with postgres")

    def _idle_agent(self) -> bool:
        accept = agents_media_type(self.current_version())
        return any(agent.is_idle for agent in self._client.agents(accept))

    def wait_for_agent(self) -> None:
        logger.info("Waiting for an agent to come up")
        self._wait(
            self._idle_agent,
            timeout=self._settings.agent_start_timeout_seconds,
            description="an idle agent",
        )
        logger.info("Agent is up")

    def service_status(self) -> None:
        self.wait_to_start()
        self.wait_for_postgres()
        self.wait_for_agent()
