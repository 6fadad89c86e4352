"""Requester contract for the config API.

A requester performs one `(method, path, body)` round trip against the
config backend. How the backend address is found (fixed base URL, cluster
service lookup) is the implementation's business; callers only see this
protocol.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import RESTResponse


@runtime_checkable
class RESTRequester(Protocol):
    """Minimal contract for a config API transport.

    Rules:
    - `request` is async because it always performs network I/O.
    - `path` is already escaped and relative to the backend base URL.
    - A non-200 status is returned, not raised. Transport failures raise
      `core.domain.errors.TransportError`.
    """

    async def request(self, method: str, path: str, body: bytes | None = None) -> RESTResponse:
        ...
