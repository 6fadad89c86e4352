"""CLI UI components (Rich).

Keeps visual details out of the command functions so they can be reused by
the resource commands and `doctor`.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.config import AppSettings
from core.domain.errors import ApplicationError, MixerError


def print_document(console: Console, text: str) -> None:
    """Print YAML or a raw response body exactly as received."""

    console.print(text.rstrip("\n"), markup=False, highlight=False, emoji=False, soft_wrap=True)


def print_message(console: Console, message: str) -> None:
    console.print(Text(message, style="green"), soft_wrap=True)


def print_error(console: Console, error: MixerError) -> None:
    """Error line for the operator; HTTP failures get the status code highlighted."""

    text = Text("Error: ", style="bold red")
    text.append(str(error), style="red")
    if isinstance(error, ApplicationError) and error.status_code is not None and error.detail is None:
        text.append(f" (HTTP {error.status_code})", style="dim")
    console.print(text, soft_wrap=True)


def build_settings_table(settings: AppSettings) -> Table:
    """Effective configuration, as used to pick the requester."""

    table = Table(title="mixerctl configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Config API service", settings.config_api_service)
    table.add_row("Dispatch", "kubernetes service" if settings.use_kube else "direct HTTP")
    table.add_row("Namespace", settings.effective_namespace())
    table.add_row("Kubeconfig", str(settings.kubeconfig) if settings.kubeconfig else "(default)")
    table.add_row("Context", settings.kube_context or "(current)")
    table.add_row("Timeout", f"{settings.request_timeout_seconds:g}s")
    return table

