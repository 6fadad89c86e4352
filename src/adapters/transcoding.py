"""YAML <-> JSON transcoding for configuration documents.

Operators write YAML; the config API speaks JSON. Documents are handled as
untyped trees, nothing here knows about rule or adapter schemas.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from core.domain.errors import DecodeError, InputError
from core.domain.models import Document


def yaml_to_document(raw: bytes | str) -> Document:
    """Decode a YAML document into a mapping.

    An empty file decodes to an empty mapping. Anything that is not a mapping
    at the top level is rejected.
    """

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise InputError(f"failed parsing YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputError(f"expected a YAML mapping, got {type(data).__name__}")
    return data


def yaml_to_json(raw: bytes | str) -> bytes:
    """Re-encode a YAML document as the JSON request body."""

    document = yaml_to_document(raw)
    try:
        encoded = json.dumps(document, ensure_ascii=False, default=_json_default)
    except (TypeError, ValueError) as exc:
        raise InputError(f"failed encoding document as JSON: {exc}") from exc
    return encoded.encode("utf-8")


def to_yaml(value: Any) -> str:
    """Render a decoded JSON value as block-style YAML."""

    try:
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=True, allow_unicode=True)
    except yaml.YAMLError as exc:
        raise DecodeError(f"failed formatting response: {exc}") from exc


def _json_default(value: Any) -> Any:
    # YAML timestamps and dates have no JSON type; send them as ISO strings.
    isoformat = getattr(value, "isoformat", None)
    if callable(isoformat):
        return isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
