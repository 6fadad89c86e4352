"""Doctor command for environment diagnostics, plus the `configure` prompt."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.kube_resolver import KubeServiceRequester
from adapters.requester_factory import build_requester
from cli.state import get_settings
from cli.ui_components import build_settings_table
from core.config import DEFAULT_CONFIG_API_SERVICE, AppSettings, write_user_env_vars
from core.domain.errors import MixerError
from core.domain.models import ResourceKind
from core.paths import resource_path
from core.services.config_client import status_text

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

# Any scope answers with a status envelope; 'global' always exists.
_PROBE_PATH = resource_path("global", ResourceKind.ADAPTER.collection)


def _check_resolution(settings: AppSettings) -> tuple[bool, str]:
    if not settings.use_kube:
        return True, "skipped (direct HTTP)"
    requester = KubeServiceRequester(
        service=settings.config_api_service,
        namespace=settings.effective_namespace(),
        settings=settings,
    )
    try:
        return True, requester.resolve()
    except MixerError as exc:
        return False, str(exc)


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    try:
        status_code, _ = await build_requester(settings).request("GET", _PROBE_PATH)
    except MixerError as exc:
        return False, str(exc)
    return True, f"HTTP {status_code} {status_text(status_code)}"


@app.command()
def run(ctx: typer.Context) -> None:
    """Show the effective configuration and check the config API is reachable."""

    settings = get_settings(ctx)
    _console.print(build_settings_table(settings))

    table = Table(title="mixerctl doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_resolve, detail_resolve = _check_resolution(settings)
    table.add_row("Service resolution", "OK" if ok_resolve else "FAIL", detail_resolve)

    ok_http = False
    if ok_resolve:
        ok_http, detail_http = asyncio.run(_check_http(settings))
        table.add_row("Config API", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not (ok_resolve and ok_http):
        raise typer.Exit(code=1)


def configure() -> None:
    """Interactive setup (stores defaults in the user config .env)."""

    service = typer.prompt(
        "Config API service",
        default=DEFAULT_CONFIG_API_SERVICE,
        show_default=True,
    ).strip()
    use_kube = typer.confirm("Resolve the service through Kubernetes?", default=True)
    namespace = typer.prompt("Namespace", default="default", show_default=True).strip()
    istio_namespace = typer.prompt(
        "Control plane namespace (empty: same as namespace)",
        default="",
        show_default=False,
    ).strip()

    if not service or not namespace:
        raise typer.BadParameter("service and namespace are required")

    env_path = write_user_env_vars(
        {
            "MIXERCTL_CONFIG_API_SERVICE": service,
            "MIXERCTL_USE_KUBE": "true" if use_kube else "false",
            "MIXERCTL_NAMESPACE": namespace,
            "MIXERCTL_ISTIO_NAMESPACE": istio_namespace or None,
        }
    )

    _console.print(f"[green]Saved mixerctl config to:[/green] {env_path}")
