import typer
import yaml
from pathlib import Path
from pydantic import ValidationError

from emqx_operator.crd.registry import CRDRegistry
from emqx_operator.webhooks import InvalidSpec


def read_yaml_raw(yaml_path: Path) -> dict:
    with open(yaml_path, "r") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_resource_file(yaml_path: Path):
    """
    Load an EmqxBroker or EmqxEnterprise manifest into its registered model.

    The model is picked from the manifest's apiVersion and kind.

    Raises:
        FileNotFoundError: If the YAML file doesn't exist
        InvalidSpec: If the kind is unknown or the manifest doesn't fit the model
    """
    data = read_yaml_raw(yaml_path)
    api_version = data.get("apiVersion", "")
    kind = data.get("kind", "")
    group, _, version = api_version.rpartition("/")

    registry = CRDRegistry()
    registry.discover_models()
    model_info = registry.get_model_by_key(group, version, kind)
    if model_info is None:
        raise InvalidSpec(f"{yaml_path}: unsupported resource {api_version} {kind}")

    try:
        return model_info["model"].model_validate(data)
    except ValidationError as e:
        raise InvalidSpec(f"{yaml_path}: invalid {kind} specification: {e}") from e


def dump_resource_yaml(emqx) -> str:
    return yaml.safe_dump(
        emqx.model_dump(mode="json", exclude_none=True),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def exit_rejected(operation: str, reason: str):
    """
    Exit the command with the rejection reason and a failure code
    """
    typer.echo(f"{operation} rejected: {reason}", err=True)
    raise typer.Exit(code=1)
