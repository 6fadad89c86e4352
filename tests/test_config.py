"""Tests for settings and the user env file."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import AppSettings, read_user_env_vars, write_user_env_vars


def test_defaults() -> None:
    settings = AppSettings()

    assert settings.config_api_service == "istio-galley:9096"
    assert settings.use_kube is True
    assert settings.request_timeout_seconds == 60.0
    assert settings.effective_namespace() == "default"


def test_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIXERCTL_NAMESPACE", "team-a")
    monkeypatch.setenv("MIXERCTL_REQUEST_TIMEOUT_SECONDS", "5")

    settings = AppSettings()

    assert settings.effective_namespace() == "team-a"
    assert settings.request_timeout_seconds == 5.0


def test_project_env_file(tmp_path: Path) -> None:
    # conftest chdirs into tmp_path, so this is the project-level .env.
    (tmp_path / ".env").write_text("MIXERCTL_ISTIO_NAMESPACE=istio-system\n", encoding="utf-8")

    assert AppSettings().effective_namespace() == "istio-system"


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        AppSettings(request_timeout_seconds=0)


def test_write_user_env_vars_merges(tmp_path: Path) -> None:
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# old\nMIXERCTL_NAMESPACE=old\nOTHER='kept'\n", encoding="utf-8")

    written = write_user_env_vars(
        {"MIXERCTL_NAMESPACE": "new", "MIXERCTL_ISTIO_NAMESPACE": None},
        env_path=env_path,
    )

    assert written == env_path
    assert read_user_env_vars(env_path) == {
        "MIXERCTL_NAMESPACE": "new",
        "OTHER": "kept",
    }


def test_none_value_removes_existing_key(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("MIXERCTL_ISTIO_NAMESPACE=old-ns\nMIXERCTL_NAMESPACE=team-a\n", encoding="utf-8")

    write_user_env_vars({"MIXERCTL_ISTIO_NAMESPACE": None}, env_path=env_path)

    assert read_user_env_vars(env_path) == {"MIXERCTL_NAMESPACE": "team-a"}
    assert "old-ns" not in env_path.read_text(encoding="utf-8")


def test_write_creates_missing_file(tmp_path: Path) -> None:
    env_path = tmp_path / "new" / ".env"

    assert read_user_env_vars(env_path) == {}
    write_user_env_vars({"MIXERCTL_USE_KUBE": "false"}, env_path=env_path)

    assert read_user_env_vars(env_path) == {"MIXERCTL_USE_KUBE": "false"}
