"""REST path builders for the config API.

Scope and subject values come straight from the command line, so each one is
escaped as a single path segment: a `/` inside a scope can never introduce a
new segment.
"""

from __future__ import annotations

from urllib.parse import quote


# Same literal set as Go's url.PathEscape: ; , / ? are escaped inside a segment.
_SEGMENT_SAFE = "$&+:=@"


def escape_segment(value: str) -> str:
    """Percent-encode `value` for use as exactly one path segment."""

    return quote(value, safe=_SEGMENT_SAFE)


def rule_path(scope: str, subject: str) -> str:
    return f"core/rules/v1/{escape_segment(scope)}/{escape_segment(subject)}"


def resource_path(scope: str, kind: str) -> str:
    """Path of the adapters/descriptors collection for `scope`.

    `kind` is the plural collection name chosen internally (`adapters`,
    `descriptors`), never user input, so it is not escaped. The empty segment
    before the scope is what the config server routes on.
    """

    return f"core/{kind}/v1//{escape_segment(scope)}"
