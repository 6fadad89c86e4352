"""Shared fixtures: in-memory config API backends and a CLI runner."""

from __future__ import annotations

import json
from typing import Any

import pytest
from typer.testing import CliRunner

from core.domain.models import RESTResponse


def _envelope(message: str, data: Any = None, code: int = 0) -> bytes:
    payload: dict[str, Any] = {"status": {"code": code, "message": message}}
    if data is not None:
        payload["data"] = data
    return json.dumps(payload).encode("utf-8")


class EchoBackend:
    """Config API double that stores PUT documents and echoes them on GET."""

    def __init__(self) -> None:
        self.store: dict[str, Any] = {}
        self.calls: list[tuple[str, str, bytes | None]] = []

    async def request(self, method: str, path: str, body: bytes | None = None) -> RESTResponse:
        self.calls.append((method, path, body))
        if method == "PUT":
            self.store[path] = json.loads(body or b"{}")
            return RESTResponse(200, _envelope("created"))
        if method == "GET":
            if path not in self.store:
                return RESTResponse(404, _envelope("not found", code=5))
            return RESTResponse(200, _envelope("ok", data={"source_data": self.store[path]}))
        if method == "DELETE":
            if self.store.pop(path, None) is None:
                return RESTResponse(404, _envelope("no such rule", code=5))
            return RESTResponse(200, _envelope("removed"))
        return RESTResponse(405, None)


class ScriptedRequester:
    """Returns one canned response and records every call."""

    def __init__(self, status_code: int = 200, body: bytes | None = None) -> None:
        self.response = RESTResponse(status_code, body)
        self.calls: list[tuple[str, str, bytes | None]] = []

    async def request(self, method: str, path: str, body: bytes | None = None) -> RESTResponse:
        self.calls.append((method, path, body))
        return self.response


@pytest.fixture
def echo_backend() -> EchoBackend:
    return EchoBackend()


@pytest.fixture
def scripted():
    """Factory for `ScriptedRequester` instances."""

    return ScriptedRequester


@pytest.fixture
def envelope():
    return _envelope


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for key in (
        "MIXERCTL_CONFIG_API_SERVICE",
        "MIXERCTL_USE_KUBE",
        "MIXERCTL_NAMESPACE",
        "MIXERCTL_ISTIO_NAMESPACE",
        "MIXERCTL_KUBECONFIG",
        "MIXERCTL_KUBE_CONTEXT",
        "MIXERCTL_REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
    # Keep a project-level .env out of the settings under test.
    monkeypatch.chdir(tmp_path)
