"""Provisioning orchestration.

This module strings the readiness checks, optional features and the pipeline
run together in the order a fresh VM needs them. The CLI only builds the
collaborators and prints the resulting report.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from adapters.go_server import GoServerHost
from adapters.gocd_api import GoCDClient
from core.config import AppSettings
from core.domain.models import ProvisionReport
from core.interfaces.feature import ServerFeature
from core.services.features import Analytics, Authorization, ElasticAgents
from core.services.pipeline import Pipeline
from core.services.readiness import ServerReadiness

logger = logging.getLogger(__name__)


class ServerConfiguration:
    """Sets up a running server and validates it end to end."""

    def __init__(
        self,
        settings: AppSettings,
        client: GoCDClient,
        host: GoServerHost,
        readiness: ServerReadiness,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._client = client
        self._host = host
        self._readiness = readiness
        self._sleep = sleep
        self._clock = clock
        self.applied: list[str] = []
        self.skipped: list[str] = []

    def features(self) -> list[ServerFeature]:
        version = self._readiness.current_version()
        return [
            Authorization(version, self._settings, self._client, self._host),
            ElasticAgents(version, self._settings, self._client, self._host, self._readiness),
            Analytics(version, self._settings, self._client, self._host, self._readiness),
        ]

    def pipeline(self) -> Pipeline:
        return Pipeline(
            self._settings.pipeline_name,
            self._client,
            self._readiness.current_version(),
            self._settings,
            sleep=self._sleep,
            clock=self._clock,
        )

    def configure_server(self) -> None:
        self._host.change_postgres_addons_jar()
        self._host.start_agent()
        self._readiness.service_status()

    def setup(self) -> None:
        self.applied, self.skipped = [], []
        for feature in self.features():
            if feature.supported():
                feature.setup()
                self.applied.append(feature.name)
            else:
                logger.info("Skipping %s: not supported by GoCD %s", feature.name, self._readiness.current_version())
                self.skipped.append(feature.name)
        self.configure_server()

    def validate(self) -> bool:
        pipeline = self.pipeline()
        pipeline.create()
        pipeline.unpause()
        pipeline.trigger()
        passed = pipeline.passed()

        applied = set(self.applied)
        for feature in self.features():
            if feature.name in applied:
                feature.validate()
        return passed

    def run(self) -> ProvisionReport:
        self._readiness.wait_to_start()
        server_version = self._client.version().full_version
        self.setup()
        passed = self.validate()
        return ProvisionReport(
            server_version=server_version,
            features_applied=list(self.applied),
            features_skipped=list(self.skipped),
            pipeline_name=self._settings.pipeline_name,
            pipeline_passed=passed,
        )
