"""Error taxonomy for config API operations.

Every failure surfaced by the client derives from `MixerError`, so the CLI
can map all of them to one non-zero exit without catching unrelated bugs.
"""

from __future__ import annotations


class MixerError(Exception):
    """Base class for every error reported to the operator."""


class InputError(MixerError):
    """Local input could not be used (missing file, malformed YAML)."""


class TransportError(MixerError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""


class ResolutionError(TransportError):
    """The config service address could not be resolved in the cluster."""


class DecodeError(MixerError):
    """A response body could not be decoded or re-encoded for display."""


class ApplicationError(MixerError):
    """The config API answered with a non-200 status."""

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        path: str | None = None,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.path = path
        self.status_code = status_code
        self.detail = detail
