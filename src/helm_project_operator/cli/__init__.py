import logging
import sys
from typing import Optional

import typer
from typing_extensions import Annotated

from helm_project_operator.config import OperatorConfig
from helm_project_operator.errors import CRDError

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv(usecwd=True))

app = typer.Typer(
    help="Helm Project Operator: CRD management and Kubernetes operator",
    add_completion=False,
)


@app.callback()
def configure_logging(
    log_level: Annotated[
        str, typer.Option("--log-level", envvar="LOG_LEVEL", help="Logging level")
    ] = "INFO",
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.command("operator")
def run_operator():
    """Run the Kubernetes operator (connects to cluster)."""
    from helm_project_operator.main import main

    main()


@app.command("write-crds")
def write_crds(
    crd_dir: Annotated[str, typer.Argument(help="Directory for operator CRDs")],
    crd_dep_dir: Annotated[
        str, typer.Argument(help="Directory for dependent CRDs")
    ],
):
    """Write CRD YAML files, one file per resource."""
    from helm_project_operator.crd.exporter import write_files

    result = write_files(crd_dir, crd_dep_dir)
    for results in result.results.values():
        for written in results:
            if written.ok:
                typer.echo(f"  - {written.path}")

    if not result.ok:
        for failure in result.failures:
            typer.echo(f"Failed to write {failure.path}: {failure.error}", err=True)


@app.command("print-crds")
def print_crds(
    dep_file: Annotated[
        Optional[str],
        typer.Option(
            "--dep-file", help="Write dependent CRDs to this file instead of stdout"
        ),
    ] = None,
):
    """Print CRDs, and dependent CRDs, as YAML."""
    from helm_project_operator.crd.exporter import print_crds as print_all

    if dep_file:
        with open(dep_file, "w") as dep_out:
            print_all(sys.stdout, dep_out)
    else:
        print_all(sys.stdout, sys.stdout)


@app.command("create-crds")
def create_crds(
    update_crds: Annotated[
        bool,
        typer.Option(
            "--update-crds", help="Re-install every CRD even if it already exists"
        ),
    ] = False,
    detect_runtime: Annotated[
        Optional[bool],
        typer.Option(
            "--detect-runtime/--no-detect-runtime",
            help="Leave helm-controller CRDs alone on k3s/rke2",
        ),
    ] = None,
):
    """Create CRDs in the cluster."""
    from helm_project_operator.crd.installer import create_crds as create_all
    from helm_project_operator.k8s import create_api_client

    config = OperatorConfig.from_env()
    if detect_runtime is None:
        detect_runtime = config.detect_runtime

    try:
        installed = create_all(
            create_api_client(),
            update_crds=update_crds or config.update_crds,
            detect_runtime=detect_runtime,
        )
    except CRDError as e:
        typer.echo(f"Failed to create CRDs: {e}", err=True)
        raise typer.Exit(1)

    if installed:
        typer.echo(f"Installed {len(installed)} CRDs")
        for definition in installed:
            typer.echo(f"  - {definition.name}")
    else:
        typer.echo("All CRDs are already installed")


@app.command("validate-models")
def validate_models():
    """Validate CRD models without generating files."""
    from helm_project_operator.crd.generator import list_crds

    try:
        groups = list_crds()
    except Exception as e:
        typer.echo(f"Model validation failed: {e}")
        raise typer.Exit(1)

    for label, group in zip(("operator", "helm-locker", "helm-controller"), groups):
        typer.echo(f"{label}: {len(group)} CRDs")
        for definition in group:
            typer.echo(f"  - {definition.name} ({definition.version})")


def main():
    app()
