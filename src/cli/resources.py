"""Rule, adapter and descriptor commands.

Each command reads its input, builds a `ConfigClient` over the requester
picked from the settings and runs one operation. Errors from the client are
reported once, here, and turned into exit code 1.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable

import typer
from rich.console import Console

from adapters.requester_factory import build_requester
from cli.state import get_settings
from cli.ui_components import print_document, print_error, print_message
from core.domain.errors import InputError, MixerError
from core.domain.models import ResourceKind
from core.services.config_client import ClientHooks, ConfigClient

_console = Console()
_err_console = Console(stderr=True)


def _read_input_file(path: Path | None) -> bytes:
    if path is None:
        raise InputError("missing required option --file/-f")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise InputError(f"failed opening {path}: {exc}") from exc


def _execute(ctx: typer.Context, operation: Callable[[ConfigClient], Awaitable[str]]) -> str:
    hooks = ClientHooks(
        on_body=lambda body: print_document(_console, body),
        on_message=lambda message: print_message(_console, message),
    )
    try:
        client = ConfigClient(build_requester(get_settings(ctx)), hooks=hooks)
        return asyncio.run(operation(client))
    except MixerError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=1) from exc


def _load_or_exit(path: Path | None) -> bytes:
    # Input errors abort before a requester is even built.
    try:
        return _read_input_file(path)
    except InputError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=1) from exc


rule_app = typer.Typer(
    no_args_is_help=True,
    help="Mixer rule configuration. Create, get and delete rules in the configuration server.",
)


@rule_app.command("create")
def rule_create(
    ctx: typer.Context,
    scope: str = typer.Argument(..., help="Rule scope, e.g. 'global'."),
    subject: str = typer.Argument(..., help="Rule subject, e.g. 'myservice.ns.svc.cluster.local'."),
    file: Path | None = typer.Option(None, "--file", "-f", help="Input file with contents of the Mixer rule."),
) -> None:
    """Create Mixer rules for the given scope and subject.

    Example: mixerctl rule create global myservice.ns.svc.cluster.local -f mixer-rule.yml
    """

    raw = _load_or_exit(file)
    _execute(ctx, lambda client: client.rule_create(scope, subject, raw))


@rule_app.command("get")
def rule_get(
    ctx: typer.Context,
    scope: str = typer.Argument(...),
    subject: str = typer.Argument(...),
) -> None:
    """Get Mixer rules for a given scope and subject."""

    out = _execute(ctx, lambda client: client.rule_get(scope, subject))
    print_document(_console, out)


@rule_app.command("delete")
def rule_delete(
    ctx: typer.Context,
    scope: str = typer.Argument(...),
    subject: str = typer.Argument(...),
) -> None:
    """Delete Mixer rules for a given scope and subject."""

    _execute(ctx, lambda client: client.rule_delete(scope, subject))


def build_scoped_app(kind: ResourceKind) -> typer.Typer:
    """Create/get commands for kinds addressed by scope only (adapters, descriptors)."""

    sub = typer.Typer(
        no_args_is_help=True,
        help=f"Mixer {kind.value} configuration. Create and list {kind.collection} in the configuration server.",
    )

    @sub.command("create", help=f"Create Mixer {kind.collection} for the given scope.")
    def create(
        ctx: typer.Context,
        scope: str = typer.Argument(..., help="Configuration scope, e.g. 'global'."),
        file: Path | None = typer.Option(
            None, "--file", "-f", help=f"Input file with contents of the {kind.collection} config."
        ),
    ) -> None:
        raw = _load_or_exit(file)
        _execute(ctx, lambda client: client.resource_create(scope, kind, raw))

    @sub.command("get", help=f"Get the Mixer {kind.value} configs for the given scope.")
    def get(
        ctx: typer.Context,
        scope: str = typer.Argument(..., help="Configuration scope, e.g. 'global'."),
    ) -> None:
        out = _execute(ctx, lambda client: client.resource_get(scope, kind))
        print_document(_console, out)

    return sub


def register_resource_commands(app: typer.Typer) -> None:
    app.add_typer(rule_app, name=ResourceKind.RULE.value)
    for kind in (ResourceKind.ADAPTER, ResourceKind.DESCRIPTOR):
        app.add_typer(build_scoped_app(kind), name=kind.value)
