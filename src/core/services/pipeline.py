"""Pipeline lifecycle: create, unpause, trigger, wait for a green stage."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

from adapters.gocd_api import GoCDClient
from core.api_versions import (
    dashboard_media_type,
    pause_media_type,
    pipeline_media_type,
    schedule_media_type,
)
from core.config import AppSettings
from core.domain.models import first_stage_status
from core.domain.version import GoVersion
from core.errors import ProvisionError, ReadinessTimeout
from core.services.polling import wait_until

logger = logging.getLogger(__name__)

PASSED = "Passed"


class Pipeline:
    def __init__(
        self,
        name: str,
        client: GoCDClient,
        version: GoVersion,
        settings: AppSettings,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self._client = client
        self._version = version
        self._settings = settings
        self._sleep = sleep
        self._clock = clock
        self.last_dashboard: dict[str, Any] | None = None

    def create(self) -> None:
        logger.info("Creating pipeline %s", self.name)
        payload = json.loads(self._settings.pipeline_config_file.read_text(encoding="utf-8"))
        self._client.create_pipeline(payload, pipeline_media_type(self._version))

    def unpause(self) -> None:
        logger.info("Unpausing pipeline %s", self.name)
        self._client.unpause_pipeline(self.name, pause_media_type(self._version))

    def trigger(self) -> None:
        logger.info("Triggering pipeline %s", self.name)
        self._client.schedule_pipeline(self.name, schedule_media_type(self._version))

    def _stage_passed(self, accept: str) -> bool:
        self.last_dashboard = self._client.dashboard(accept)
        status = first_stage_status(self.last_dashboard)
        logger.debug("Pipeline %s first stage status: %s", self.name, status)
        return status == PASSED

    def wait_until_passed(self) -> None:
        accept = dashboard_media_type(self._version)
        if accept is None:
            raise ProvisionError(f"GoCD {self._version} has no dashboard API")

        interval = self._settings.poll_interval_seconds
        try:
            wait_until(
                lambda: self._stage_passed(accept),
                timeout=self._settings.pipeline_timeout_seconds,
                interval=interval,
                initial_delay=interval,
                description=f"pipeline {self.name} to pass",
                sleep=self._sleep,
                clock=self._clock,
            )
        except ReadinessTimeout as exc:
            raise ReadinessTimeout(
                f"pipeline {self.name} to pass (not built successfully)",
                exc.timeout,
                self.last_dashboard,
            ) from exc
        logger.info("Pipeline %s completed with success", self.name)

    def passed(self) -> bool:
        self.wait_until_passed()
        return True
