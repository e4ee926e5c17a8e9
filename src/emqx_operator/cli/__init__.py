import typer
from enum import Enum
from pathlib import Path
from typing import Optional
from typing_extensions import Annotated

import emqx_operator.cli.utils as cli_utils
from emqx_operator.webhooks import (
    RejectionError,
    default,
    validate_create,
    validate_delete,
    validate_update,
)

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())

app = typer.Typer(
    help="EMQX operator: admission webhooks for EmqxBroker and EmqxEnterprise",
    add_completion=False,
)


class Operation(str, Enum):
    create = "create"
    update = "update"
    delete = "delete"


@app.command("operator")
def run_operator():
    """Run the Kubernetes operator serving the admission webhooks."""
    from emqx_operator.main import main

    main()


@app.command("default")
def default_resource(
    manifest: Annotated[Path, typer.Argument(help="Resource manifest (YAML)")],
):
    """Print the manifest with all defaults applied."""
    try:
        emqx = cli_utils.load_resource_file(manifest)
    except RejectionError as e:
        cli_utils.exit_rejected("default", e.reason)

    typer.echo(cli_utils.dump_resource_yaml(default(emqx)), nl=False)


@app.command("validate")
def validate_resource(
    manifest: Annotated[Path, typer.Argument(help="Resource manifest (YAML)")],
    old: Annotated[
        Optional[Path],
        typer.Option("--old", help="Previously accepted manifest, for updates"),
    ] = None,
    operation: Annotated[
        Optional[Operation],
        typer.Option(
            "--operation", help="Admission operation (defaults to update with --old)"
        ),
    ] = None,
    skip_defaults: Annotated[
        bool,
        typer.Option("--skip-defaults", help="Validate the manifest as written"),
    ] = False,
):
    """
    Run the admission pipeline on a manifest the way the API server would.

    Both manifests are defaulted first unless --skip-defaults is given, then
    validated for the chosen operation. Exits with code 1 on rejection.

    Example usage:
        emqx-operator validate emqx.yaml --old emqx-previous.yaml
    """
    if operation is None:
        operation = Operation.update if old is not None else Operation.create

    if operation == Operation.update and old is None:
        typer.echo("--old is required to validate an update", err=True)
        raise typer.Exit(code=2)

    try:
        emqx = cli_utils.load_resource_file(manifest)
        previous = cli_utils.load_resource_file(old) if old is not None else None

        if not skip_defaults and operation != Operation.delete:
            default(emqx)
            if previous is not None:
                default(previous)

        if operation == Operation.create:
            validate_create(emqx)
        elif operation == Operation.update:
            validate_update(emqx, previous)
        else:
            validate_delete(emqx)
    except RejectionError as e:
        cli_utils.exit_rejected(operation.value, e.reason)

    typer.echo(f"{operation.value} allowed: {emqx.get_name()}")


@app.command("list-kinds")
def list_kinds():
    """List the resource kinds served by the webhooks."""
    from emqx_operator.crd.registry import CRDRegistry

    registry = CRDRegistry()
    registry.discover_models()
    for key, model_info in registry.get_all_models().items():
        typer.echo(f"{key} ({model_info['plural']})")
