"""CRUD operations against the config API.

The CLI delegates every network-facing concern to `ConfigClient`: building
paths, transcoding documents and interpreting the response envelope. Output
goes through optional hooks so the core never prints by itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Callable

from pydantic import ValidationError

from adapters.transcoding import to_yaml, yaml_to_json
from core.domain.errors import ApplicationError, DecodeError
from core.domain.models import ApiResponse, ResourceIdentity, ResourceKind
from core.interfaces.requester import RESTRequester

logger = logging.getLogger("mixerctl.client")

UNKNOWN_MESSAGE = "unknown"


@dataclass
class ClientHooks:
    """Optional callbacks for UI layers."""

    # Raw response body, emitted before it is interpreted.
    on_body: Callable[[str], None] | None = None
    # `status.message` of a successful write.
    on_message: Callable[[str], None] | None = None


def status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"


def _status_message(body: bytes) -> str:
    try:
        return ApiResponse.model_validate_json(body).message(UNKNOWN_MESSAGE)
    except ValidationError:
        return UNKNOWN_MESSAGE


class ConfigClient:
    """Thin CRUD client over a `RESTRequester`."""

    def __init__(self, requester: RESTRequester, hooks: ClientHooks | None = None) -> None:
        self._requester = requester
        self._hooks = hooks or ClientHooks()

    async def get(self, path: str) -> str:
        """GET `path` and return its `source_data` rendered as YAML."""

        status_code, body = await self._requester.request("GET", path)
        if status_code != HTTPStatus.OK:
            raise ApplicationError(
                status_text(status_code),
                method="GET",
                path=path,
                status_code=status_code,
            )

        try:
            response = ApiResponse.model_validate_json(body or b"")
        except ValidationError as exc:
            raise DecodeError(f"failed processing response: {exc}") from exc
        return to_yaml(response.payload())

    async def create(self, path: str, raw_yaml: bytes | str) -> str:
        """PUT the YAML document at `path` as JSON.

        Malformed YAML raises `InputError` before any request is sent.
        """

        encoded = yaml_to_json(raw_yaml)
        return await self._request("PUT", path, encoded)

    async def delete(self, path: str) -> str:
        return await self._request("DELETE", path)

    async def _request(self, method: str, path: str, body: bytes | None = None) -> str:
        status_code, response_body = await self._requester.request(method, path, body)

        message = UNKNOWN_MESSAGE
        if response_body is not None:
            # The body may explain a failure, so it is shown before anything else.
            if self._hooks.on_body:
                self._hooks.on_body(response_body.decode("utf-8", errors="replace"))
            message = _status_message(response_body)

        if status_code != HTTPStatus.OK:
            raise ApplicationError(
                f"failed to {method} {path} with status {status_code}: {message}",
                method=method,
                path=path,
                status_code=status_code,
                detail=message,
            )

        if response_body is None:
            logger.debug("%s %s returned no body", method, path)

        if self._hooks.on_message:
            self._hooks.on_message(message)
        return message

    # Rules: scope + subject

    async def rule_get(self, scope: str, subject: str) -> str:
        return await self.get(ResourceIdentity(kind=ResourceKind.RULE, scope=scope, subject=subject).path)

    async def rule_create(self, scope: str, subject: str, raw_yaml: bytes | str) -> str:
        identity = ResourceIdentity(kind=ResourceKind.RULE, scope=scope, subject=subject)
        return await self.create(identity.path, raw_yaml)

    async def rule_delete(self, scope: str, subject: str) -> str:
        return await self.delete(ResourceIdentity(kind=ResourceKind.RULE, scope=scope, subject=subject).path)

    # Adapters and descriptors: scope only

    async def resource_get(self, scope: str, kind: ResourceKind) -> str:
        return await self.get(ResourceIdentity(kind=kind, scope=scope).path)

    async def resource_create(self, scope: str, kind: ResourceKind, raw_yaml: bytes | str) -> str:
        return await self.create(ResourceIdentity(kind=kind, scope=scope).path, raw_yaml)
