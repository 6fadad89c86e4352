"""Core configuration.

Centralizes environment variables (pydantic-settings) so that the CLI and the
requesters read the same contract. CLI flags are applied on top of these
values with `AppSettings.model_copy(update=...)`.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values, set_key, unset_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CONFIG_API_SERVICE = "istio-galley:9096"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "mixerctl"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "mixerctl"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "mixerctl"
    return Path.home() / ".config" / "mixerctl"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_user_env_vars(env_path: Path | None = None) -> dict[str, str]:
    """Variables currently stored in the user's .env file (empty if missing)."""

    env_path = env_path or get_user_env_file()
    if not env_path.exists():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def write_user_env_vars(values: Mapping[str, str | None], env_path: Path | None = None) -> Path:
    """Merge `values` into the user's global .env file.

    A `None` value removes the key, so a setting cleared by the operator falls
    back to its default instead of keeping an older answer. Keys absent from
    `values` are preserved.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    if not env_path.exists():
        env_path.write_text("# mixerctl user config (.env)\n", encoding="utf-8")

    current = read_user_env_vars(env_path)
    for key, value in values.items():
        if value is None:
            if key in current:
                unset_key(env_path, key)
        else:
            set_key(env_path, key, value, quote_mode="never")
    return env_path


class AppSettings(BaseSettings):
    """Central application configuration.

    One typed contract for the CLI, the requester factory and `doctor`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MIXERCTL_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    config_api_service: str = Field(
        default=DEFAULT_CONFIG_API_SERVICE,
        min_length=1,
        description=(
            "Name[:port] of the config API service. With use_kube=False this is "
            "the address of the service."
        ),
    )
    use_kube: bool = Field(
        default=True,
        description="Resolve the config API service through the Kubernetes API.",
    )
    namespace: str = Field(
        default="default",
        min_length=1,
        description="Kubernetes namespace used when istio_namespace is not set.",
    )
    istio_namespace: str | None = Field(
        default=None,
        description="Namespace where the control plane services live.",
    )
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to a kubeconfig file (defaults to the client's lookup rules).",
    )
    kube_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use.",
    )

    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="mixerctl/0.1",
        min_length=1,
        description="User-Agent sent to the config API.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )

    def effective_namespace(self) -> str:
        """Namespace where the config service is looked up.

        Falls back to `namespace` while `istio_namespace` is empty.
        """

        return self.istio_namespace or self.namespace
