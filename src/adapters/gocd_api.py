"""GoCD REST client.

Implementation:
- One method per endpoint the harness touches; the caller passes the `Accept`
  media type resolved for the running server (see `core.api_versions`).
- Every non-success status raises `httpx.HTTPStatusError`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.http_client import build_client
from core.api_versions import version_media_type
from core.config import AppSettings
from core.domain.models import Agent, ServerVersion

logger = logging.getLogger(__name__)

_CONFIRM_HEADERS = {"Confirm": "true", "X-GoCD-Confirm": "true"}


class GoCDClient:
    """Thin synchronous client for the GoCD API."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._http = build_client(self._settings, transport=transport)

    def __enter__(self) -> "GoCDClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _get_json(self, path: str, accept: str) -> Any:
        response = self._http.get(path, headers={"Accept": accept})
        response.raise_for_status()
        return response.json()

    def _post(
        self,
        path: str,
        accept: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        all_headers = {"Accept": accept}
        if headers:
            all_headers.update(headers)
        logger.debug("POST %s (Accept: %s)", path, accept)
        response = self._http.post(path, json=json, headers=all_headers)
        response.raise_for_status()
        return response

    def version(self) -> ServerVersion:
        return ServerVersion.model_validate(self._get_json("/api/version", version_media_type()))

    def ping(self) -> bool:
        """True once the login page answers (200 or the 302 to the login form)."""

        response = self._http.get("/auth/login")
        return response.is_success or response.status_code == 302

    def agents(self, accept: str) -> list[Agent]:
        payload = self._get_json("/api/agents", accept)
        raw = (payload.get("_embedded") or {}).get("agents") or []
        return [Agent.model_validate(item) for item in raw]

    def dashboard(self, accept: str) -> dict[str, Any]:
        return self._get_json("/api/dashboard", accept)

    def create_pipeline(self, payload: dict[str, Any], accept: str) -> httpx.Response:
        return self._post(
            "/api/admin/pipelines",
            accept,
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    def unpause_pipeline(self, name: str, accept: str) -> httpx.Response:
        return self._post(f"/api/pipelines/{name}/unpause", accept, headers=_CONFIRM_HEADERS)

    def schedule_pipeline(self, name: str, accept: str) -> httpx.Response:
        return self._post(f"/api/pipelines/{name}/schedule", accept, headers=_CONFIRM_HEADERS)

    def create_auth_config(self, config: dict[str, Any], accept: str) -> httpx.Response:
        return self._post(
            "/api/admin/security/auth_configs",
            accept,
            json=config,
            headers={"Content-Type": "application/json"},
        )

    def auth_config(self, config_id: str, accept: str) -> dict[str, Any]:
        return self._get_json(f"/api/admin/security/auth_configs/{config_id}", accept)

    def plugin_info(self, plugin_id: str, accept: str) -> dict[str, Any]:
        return self._get_json(f"/api/admin/plugin_info/{plugin_id}", accept)
