"""Shared fixtures: a fake GoCD server, a recording shell and a fake clock."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from adapters.gocd_api import GoCDClient
from core.config import AppSettings

BASE = "/go"


def dashboard_with_status(status: str | None) -> dict[str, Any]:
    """Minimal HAL dashboard holding one pipeline instance whose first stage has `status`."""

    if status is None:
        return {"_embedded": {"pipeline_groups": []}}
    stage = {"name": "up42_stage", "status": status}
    instance = {"_embedded": {"stages": [stage]}}
    pipeline = {"name": "up42", "_embedded": {"instances": [instance]}}
    group = {"name": "first", "_embedded": {"pipelines": [pipeline]}}
    return {"_embedded": {"pipeline_groups": [group]}}


class FakeGoCD:
    """In-memory stand-in for the GoCD REST API, served through `httpx.MockTransport`."""

    def __init__(self, version: str = "18.2.0", build: str = "6228") -> None:
        self.version = version
        self.build = build
        self.agent_states: list[list[str]] = [["Idle"]]
        self.dashboards: list[dict[str, Any]] = [dashboard_with_status("Passed")]
        self.login_status = 302
        self.refuse_connections = 0
        self.auth_configs: dict[str, dict[str, Any]] = {}
        self.plugins: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def _next(self, items: list[Any]) -> Any:
        return items.pop(0) if len(items) > 1 else items[0]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.refuse_connections > 0:
            self.refuse_connections -= 1
            raise httpx.ConnectError("Connection refused", request=request)
        self.requests.append(request)
        path = request.url.path.removeprefix(BASE)
        method = request.method

        if method == "GET" and path == "/auth/login":
            return httpx.Response(self.login_status)
        if method == "GET" and path == "/api/version":
            return httpx.Response(200, json={"version": self.version, "build_number": self.build})
        if method == "GET" and path == "/api/agents":
            states = self._next(self.agent_states)
            agents = [{"uuid": f"a{i}", "hostname": "vm", "agent_state": s} for i, s in enumerate(states)]
            return httpx.Response(200, json={"_embedded": {"agents": agents}})
        if method == "GET" and path == "/api/dashboard":
            return httpx.Response(200, json=self._next(self.dashboards))
        if method == "POST" and path == "/api/admin/pipelines":
            return httpx.Response(200, json=json.loads(request.content))
        if method == "POST" and path.startswith("/api/pipelines/"):
            return httpx.Response(202, json={"message": "ok"})
        if method == "POST" and path == "/api/admin/security/auth_configs":
            body = json.loads(request.content)
            self.auth_configs[body["id"]] = body
            return httpx.Response(200, json=body)
        if method == "GET" and path.startswith("/api/admin/security/auth_configs/"):
            config = self.auth_configs.get(path.rsplit("/", 1)[-1])
            return httpx.Response(200, json=config) if config else httpx.Response(404)
        if method == "GET" and path.startswith("/api/admin/plugin_info/"):
            info = self.plugins.get(path.rsplit("/", 1)[-1])
            return httpx.Response(200, json=info) if info else httpx.Response(404)
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == BASE + path]


class FakeClock:
    """Monotonic clock that only moves when `sleep` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingRunner:
    """Collects shell commands instead of running them."""

    def __init__(self, fail_on: Callable[[str], bool] | None = None) -> None:
        self.commands: list[str] = []
        self.displays: list[str] = []
        self._fail_on = fail_on

    def run(self, command: str, *, display: str | None = None) -> subprocess.CompletedProcess[str]:
        self.commands.append(command)
        self.displays.append(display or command)
        if self._fail_on and self._fail_on(command):
            raise subprocess.CalledProcessError(1, command)
        return subprocess.CompletedProcess(args=command, returncode=0, stdout="", stderr="")

    def run_as(self, user: str, command: str, *, display: str | None = None) -> subprocess.CompletedProcess[str]:
        return self.run(f"[{user}] {command}", display=f"[{user}] {display}" if display else None)


@pytest.fixture
def pipeline_file(tmp_path: Path) -> Path:
    path = tmp_path / "pipeline.json"
    path.write_text(json.dumps({"group": "first", "pipeline": {"name": "up42"}}), encoding="utf-8")
    return path


@pytest.fixture
def addon_builds_file(tmp_path: Path) -> Path:
    path = tmp_path / "addon_builds.json"
    path.write_text(
        json.dumps(
            [
                {"gocd_version": "18.1.0-5937", "addons": {"postgresql": "go-postgresql-18.1.0-old.jar"}},
                {"gocd_version": "18.2.0-6228", "addons": {"postgresql": "go-postgresql-18.2.0-1.jar"}},
                {"gocd_version": "18.2.0-6228", "addons": {"postgresql": "go-postgresql-18.2.0-2.jar"}},
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def settings(
    tmp_path: Path, tmp_path_factory: pytest.TempPathFactory, pipeline_file: Path, addon_builds_file: Path
) -> AppSettings:
    return AppSettings(
        server_url="http://localhost:8153/go",
        admin_username="admin",
        admin_password="badger",
        poll_interval_seconds=5,
        server_start_timeout_seconds=20,
        postgres_start_timeout_seconds=20,
        agent_start_timeout_seconds=20,
        pipeline_timeout_seconds=20,
        use_postgres=False,
        go_version="18.2.0-6228",
        addons_source_dir=tmp_path_factory.mktemp("addons"),
        addon_builds_file=addon_builds_file,
        server_log_file=tmp_path / "go-server.log",
        pipeline_config_file=pipeline_file,
        extensions_user="ext",
        extensions_password="secret",
        ea_plugin_download_url=None,
        analytics_plugin_download_url=None,
    )


@pytest.fixture
def gocd() -> FakeGoCD:
    return FakeGoCD()


@pytest.fixture
def client(settings: AppSettings, gocd: FakeGoCD):
    with GoCDClient(settings, transport=gocd.transport()) as c:
        yield c


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()
