"""Tests for ConfigClient CRUD operations."""

from __future__ import annotations

import json

import pytest
import yaml

from core.domain.errors import ApplicationError, DecodeError, InputError
from core.domain.models import ResourceKind
from core.services.config_client import ClientHooks, ConfigClient, status_text

RULE_YAML = b"""
rules:
- selector: target.service == "reviews.default.svc.cluster.local"
  aspects:
  - kind: denials
"""


class RecordingHooks:
    def __init__(self) -> None:
        self.bodies: list[str] = []
        self.messages: list[str] = []

    def hooks(self) -> ClientHooks:
        return ClientHooks(on_body=self.bodies.append, on_message=self.messages.append)


@pytest.mark.asyncio
async def test_create_then_get_returns_same_document(echo_backend) -> None:
    client = ConfigClient(echo_backend)

    message = await client.rule_create("global", "reviews.default.svc.cluster.local", RULE_YAML)
    out = await client.rule_get("global", "reviews.default.svc.cluster.local")

    assert message == "created"
    assert yaml.safe_load(out) == yaml.safe_load(RULE_YAML)


@pytest.mark.asyncio
async def test_create_sends_json_body_with_put(echo_backend) -> None:
    client = ConfigClient(echo_backend)

    await client.resource_create("global", ResourceKind.ADAPTER, b"adapters:\n- name: default\n  kind: quotas\n")

    method, path, body = echo_backend.calls[0]
    assert method == "PUT"
    assert path == "core/adapters/v1//global"
    assert json.loads(body) == {"adapters": [{"name": "default", "kind": "quotas"}]}


@pytest.mark.asyncio
async def test_get_404_raises_status_text(echo_backend) -> None:
    client = ConfigClient(echo_backend)

    with pytest.raises(ApplicationError) as excinfo:
        await client.rule_get("global", "missing")

    assert str(excinfo.value) == "Not Found"
    assert excinfo.value.status_code == 404
    assert excinfo.value.method == "GET"


@pytest.mark.asyncio
async def test_get_reads_top_level_source_data(scripted) -> None:
    requester = scripted(200, json.dumps({"source_data": {"descriptors": []}}).encode())

    out = await ConfigClient(requester).resource_get("global", ResourceKind.DESCRIPTOR)

    assert yaml.safe_load(out) == {"descriptors": []}
    assert requester.calls == [("GET", "core/descriptors/v1//global", None)]


@pytest.mark.asyncio
async def test_get_malformed_json_is_decode_error(scripted) -> None:
    client = ConfigClient(scripted(200, b"<html>gateway</html>"))

    with pytest.raises(DecodeError, match="failed processing response"):
        await client.get("core/rules/v1/global/svc")


@pytest.mark.asyncio
async def test_create_malformed_yaml_makes_no_request(scripted) -> None:
    requester = scripted(200, None)
    client = ConfigClient(requester)

    with pytest.raises(InputError):
        await client.rule_create("global", "svc", b"rules: [unclosed")

    assert requester.calls == []


@pytest.mark.asyncio
async def test_delete_surfaces_removed_message(scripted) -> None:
    body = json.dumps({"status": {"code": 200, "message": "removed"}}).encode()
    recorder = RecordingHooks()
    client = ConfigClient(scripted(200, body), hooks=recorder.hooks())

    message = await client.rule_delete("global", "svc")

    assert message == "removed"
    assert recorder.bodies == [body.decode()]
    assert recorder.messages == ["removed"]


@pytest.mark.asyncio
async def test_missing_status_message_falls_back_to_unknown(scripted) -> None:
    recorder = RecordingHooks()
    client = ConfigClient(scripted(200, b'{"status": {"code": 0}}'), hooks=recorder.hooks())

    assert await client.rule_delete("global", "svc") == "unknown"
    assert recorder.messages == ["unknown"]


@pytest.mark.asyncio
async def test_failed_write_combines_method_path_status_and_message(scripted, envelope) -> None:
    recorder = RecordingHooks()
    client = ConfigClient(scripted(400, envelope("bad selector", code=3)), hooks=recorder.hooks())

    with pytest.raises(ApplicationError) as excinfo:
        await client.rule_create("global", "svc", RULE_YAML)

    assert str(excinfo.value) == "failed to PUT core/rules/v1/global/svc with status 400: bad selector"
    assert excinfo.value.detail == "bad selector"
    # The body is shown even though the request failed, but no success message.
    assert len(recorder.bodies) == 1
    assert recorder.messages == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"not json", b'{"status": "broken"}', b"[1, 2]"])
async def test_failed_write_with_unparseable_status_uses_unknown(scripted, body: bytes) -> None:
    client = ConfigClient(scripted(500, body))

    with pytest.raises(ApplicationError, match="with status 500: unknown$"):
        await client.rule_delete("global", "svc")


@pytest.mark.asyncio
async def test_write_without_body(scripted) -> None:
    recorder = RecordingHooks()
    client = ConfigClient(scripted(200, None), hooks=recorder.hooks())

    assert await client.rule_delete("global", "svc") == "unknown"
    assert recorder.bodies == []
    assert recorder.messages == ["unknown"]

    with pytest.raises(ApplicationError, match="with status 503: unknown"):
        await ConfigClient(scripted(503, None)).rule_delete("global", "svc")


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found(echo_backend) -> None:
    client = ConfigClient(echo_backend)
    await client.rule_create("global", "svc", RULE_YAML)

    assert await client.rule_delete("global", "svc") == "removed"
    with pytest.raises(ApplicationError, match="^Not Found$"):
        await client.rule_get("global", "svc")


def test_status_text() -> None:
    assert status_text(404) == "Not Found"
    assert status_text(200) == "OK"
    assert status_text(799) == "HTTP 799"


@pytest.mark.asyncio
async def test_named_status_code_keeps_message(scripted) -> None:
    body = b'{"status": {"code": "INVALID_ARGUMENT", "message": "bad selector"}}'

    with pytest.raises(ApplicationError) as excinfo:
        await ConfigClient(scripted(400, body)).rule_delete("global", "svc")
    assert excinfo.value.detail == "bad selector"

    ok = b'{"status": {"code": "OK", "message": "deleted"}}'
    assert await ConfigClient(scripted(200, ok)).rule_delete("global", "svc") == "deleted"
