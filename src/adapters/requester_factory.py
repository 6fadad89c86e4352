"""Requester selection.

Picks the concrete `RESTRequester` once, at command start-up, from the
effective settings.
"""

from __future__ import annotations

from adapters.http_client import HTTPRequester
from adapters.kube_resolver import KubeServiceRequester
from core.config import AppSettings
from core.interfaces.requester import RESTRequester


def build_requester(settings: AppSettings) -> RESTRequester:
    if settings.use_kube:
        return KubeServiceRequester(
            service=settings.config_api_service,
            namespace=settings.effective_namespace(),
            settings=settings,
        )
    return HTTPRequester(settings.config_api_service, settings)
