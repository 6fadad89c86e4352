"""Service-resolved requester.

Looks up the config API Service through the Kubernetes API and then performs
the same HTTP call the direct requester would, against the cluster address
of that Service.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from adapters.http_client import HTTPRequester
from core.config import AppSettings
from core.domain.errors import ResolutionError
from core.domain.models import RESTResponse

logger = logging.getLogger("mixerctl.kube")


def parse_service_ref(ref: str) -> tuple[str, int | None]:
    """`istio-galley:9096` -> (`istio-galley`, 9096); the port is optional."""

    name, sep, port = ref.strip().partition(":")
    if not name:
        raise ResolutionError(f"invalid service reference {ref!r}")
    if not sep or not port:
        return name, None
    try:
        return name, int(port)
    except ValueError as exc:
        raise ResolutionError(f"invalid port in service reference {ref!r}") from exc


def load_core_api(settings: AppSettings) -> k8s_client.CoreV1Api:
    """Build an isolated CoreV1 client from kubeconfig.

    In-cluster config is only tried when no kubeconfig path was given.
    """

    try:
        api_client = k8s_config.new_client_from_config(
            config_file=str(settings.kubeconfig) if settings.kubeconfig else None,
            context=settings.kube_context,
        )
    except (ConfigException, FileNotFoundError) as kube_exc:
        if settings.kubeconfig is not None:
            raise ResolutionError(f"failed loading kubeconfig {settings.kubeconfig}: {kube_exc}") from kube_exc
        try:
            k8s_config.load_incluster_config()
        except ConfigException:
            raise ResolutionError(f"failed loading Kubernetes configuration: {kube_exc}") from kube_exc
        api_client = k8s_client.ApiClient()
    return k8s_client.CoreV1Api(api_client)


def service_base_url(service: Any, name: str, port: int | None) -> str:
    """Pick `http://<clusterIP>:<port>` from a V1Service object."""

    spec = service.spec
    cluster_ip = getattr(spec, "cluster_ip", None) if spec is not None else None
    if not cluster_ip or cluster_ip == "None":
        raise ResolutionError(f"service {name} has no cluster IP")

    ports = list(getattr(spec, "ports", None) or [])
    if port is None:
        if not ports:
            raise ResolutionError(f"service {name} exposes no ports")
        port = ports[0].port
    elif ports and all(p.port != port for p in ports):
        raise ResolutionError(f"service {name} does not expose port {port}")

    return f"http://{cluster_ip}:{port}"


class KubeServiceRequester:
    """Requester that resolves `service` in `namespace` before each call."""

    def __init__(
        self,
        service: str,
        namespace: str,
        settings: AppSettings | None = None,
        *,
        core_api: k8s_client.CoreV1Api | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.service = service
        self.namespace = namespace
        self._settings = settings or AppSettings()
        self._core_api = core_api
        self._transport = transport

    def _api(self) -> k8s_client.CoreV1Api:
        if self._core_api is None:
            self._core_api = load_core_api(self._settings)
        return self._core_api

    def resolve(self) -> str:
        """Return the base URL of the service (blocking)."""

        name, port = parse_service_ref(self.service)
        try:
            service = self._api().read_namespaced_service(name=name, namespace=self.namespace)
        except ApiException as exc:
            if exc.status == 404:
                raise ResolutionError(
                    f"service {name} not found in namespace {self.namespace}"
                ) from exc
            raise ResolutionError(
                f"failed looking up service {name} in namespace {self.namespace}: {exc.reason}"
            ) from exc
        except Urllib3HTTPError as exc:
            raise ResolutionError(f"Kubernetes API unreachable: {exc}") from exc

        base_url = service_base_url(service, name, port)
        logger.debug("resolved %s/%s -> %s", self.namespace, name, base_url)
        return base_url

    async def request(self, method: str, path: str, body: bytes | None = None) -> RESTResponse:
        base_url = await asyncio.to_thread(self.resolve)
        direct = HTTPRequester(base_url, self._settings, transport=self._transport)
        return await direct.request(method, path, body)
