"""httpx wrapper.

Why a wrapper:
- Standardizes base URL, timeouts, headers and basic auth for every call.
- Eases testing: tests pass an `httpx.MockTransport` instead of a live server.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` pointed at the GoCD server.

    Redirects are not followed: the login page answers 302 once the server
    is up, and that is a valid readiness signal.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        base_url=settings.api_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        auth=httpx.BasicAuth(settings.admin_username, settings.admin_password),
        transport=transport,
    )
