"""httpx wrapper for the config API.

Standardizes timeouts and headers for every request, and exposes the direct
`HTTPRequester` (fixed base URL). The service-resolved requester builds on
the same class once it knows the address.
"""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import RESTResponse

logger = logging.getLogger("mixerctl.http")


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the CLI's defaults.

    `transport` lets tests plug an `httpx.MockTransport` in.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_seconds),
        headers=headers,
        transport=transport,
    )


def normalize_base_url(address: str) -> str:
    """`istio-galley:9096` -> `http://istio-galley:9096`."""

    address = address.strip()
    if "://" not in address:
        address = f"http://{address}"
    return address.rstrip("/")


class HTTPRequester:
    """Direct requester: `base_url + "/" + path`, one request per call."""

    def __init__(
        self,
        base_url: str,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        self._settings = settings or AppSettings()
        self._transport = transport

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(self, method: str, path: str, body: bytes | None = None) -> RESTResponse:
        url = self.url_for(path)
        headers = {"Content-Type": "application/json"} if body is not None else None

        logger.debug("%s %s", method, url)
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                # Pass the URL pre-built: the escaped segments must reach the wire as-is.
                response = await client.request(method, httpx.URL(url), content=body, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return RESTResponse(response.status_code, response.content or None)
