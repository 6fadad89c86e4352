"""mixerctl command-line entry point.

The root callback turns global flags into an `AppSettings` instance and
stores it on the Typer context; subcommands receive it from there instead of
reading process-wide state.
"""

from __future__ import annotations

from pathlib import Path

import typer
from click.core import ParameterSource

from cli import doctor, resources
from cli.state import CLIState
from core.config import AppSettings
from core.logging import setup_logging

app = typer.Typer(
    no_args_is_help=True,
    help=(
        "Mixer policy configuration.\n\n"
        "Create, get and delete Mixer rules, adapters and descriptors in the "
        "configuration server."
    ),
)


@app.callback()
def main(
    ctx: typer.Context,
    config_api_service: str | None = typer.Option(
        None,
        "--config-api-service",
        "--galleyAPIServer",
        help=(
            "Name of the config API service. When --no-kube is set this is the "
            "address of the service."
        ),
    ),
    use_kube: bool = typer.Option(
        True,
        "--kube/--no-kube",
        help="Resolve the config API service through the Kubernetes API.",
    ),
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Kubernetes namespace."),
    istio_namespace: str | None = typer.Option(
        None,
        "--istio-namespace",
        "-i",
        help="Namespace of the control plane services (defaults to --namespace).",
    ),
    kubeconfig: Path | None = typer.Option(None, "--kubeconfig", "-c", help="Kubernetes config file."),
    context: str | None = typer.Option(None, "--context", help="Kubeconfig context."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    overrides = {
        "config_api_service": config_api_service,
        "use_kube": use_kube if ctx.get_parameter_source("use_kube") is ParameterSource.COMMANDLINE else None,
        "namespace": namespace,
        "istio_namespace": istio_namespace,
        "kubeconfig": kubeconfig,
        "kube_context": context,
    }
    settings = AppSettings()
    settings = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = CLIState(settings=settings)


resources.register_resource_commands(app)
app.add_typer(doctor.app, name="doctor")
app.command(name="configure")(doctor.configure)


def run(argv: list[str] | None = None) -> None:
    """Console-script entry point; `argv` defaults to `sys.argv[1:]`."""

    app(args=argv, prog_name="mixerctl")
