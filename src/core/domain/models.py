"""Domain models (Pydantic v2).

These models describe *what* the config API exchanges, not *how* it is
reached. Documents themselves stay untyped: the config API owns the schema
and validates it remotely.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.paths import resource_path, rule_path


Document = dict[str, Any]


class ResourceKind(str, Enum):
    """Kinds of policy configuration managed by the config API."""

    RULE = "rule"
    ADAPTER = "adapter"
    DESCRIPTOR = "descriptor"

    @property
    def collection(self) -> str:
        """Plural form used in REST paths (`rules`, `adapters`, ...)."""

        return f"{self.value}s"


class RESTResponse(NamedTuple):
    """Raw outcome of a single request: HTTP status plus body bytes (if any)."""

    status_code: int
    body: bytes | None


class ResourceIdentity(BaseModel):
    """Positional identity of a configuration resource.

    Rules are addressed by scope and subject; adapters and descriptors by
    scope only. No validation beyond URL escaping is applied.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind = Field(..., description="Resource kind.")
    scope: str = Field(..., description="Configuration scope (e.g. 'global').")
    subject: str | None = Field(
        default=None,
        description="Rule subject (e.g. 'myservice.ns.svc.cluster.local').",
    )

    @property
    def path(self) -> str:
        if self.kind is ResourceKind.RULE:
            if self.subject is None:
                raise ValueError("rules are addressed by scope and subject")
            return rule_path(self.scope, self.subject)
        return resource_path(self.scope, self.kind.collection)


class ApiStatus(BaseModel):
    """`status` block of the config API envelope (google.rpc.Status shape)."""

    model_config = ConfigDict(extra="ignore")

    # google.rpc codes arrive as ints or enum names depending on the server.
    code: Any = None
    message: str | None = None


class ApiResponse(BaseModel):
    """Generic result-or-error envelope returned for every operation."""

    model_config = ConfigDict(extra="ignore")

    data: Any = None
    status: ApiStatus | None = None
    source_data: Any = Field(
        default=None,
        description="Top-level payload sent by config servers that skip `data`.",
    )

    @field_validator("status", mode="before")
    @classmethod
    def _loose_status(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value
        return None

    def payload(self) -> Any:
        """Document to redisplay: `data.source_data`, else top-level `source_data`."""

        if isinstance(self.data, dict) and "source_data" in self.data:
            return self.data["source_data"]
        return self.source_data

    def message(self, default: str = "unknown") -> str:
        if self.status is not None and self.status.message is not None:
            return self.status.message
        return default
