"""Kopf admission handlers for EmqxBroker and EmqxEnterprise resources."""

import logging

import kopf
from pydantic import ValidationError

from emqx_operator.crd.registry import CRDRegistry
from emqx_operator.constants import GROUP, VERSION
from emqx_operator.webhooks import (
    InvalidSpec,
    default,
    validate_create,
    validate_delete,
    validate_update,
)

logger = logging.getLogger(__name__)


def load_resource(plural, body):
    """Parse an admission body into the model registered for ``plural``."""
    model_info = CRDRegistry().get_model_by_plural(GROUP, VERSION, plural)
    if model_info is None:
        raise InvalidSpec(f"Unsupported resource {GROUP}/{VERSION}/{plural}")

    try:
        return model_info["model"].model_validate(dict(body))
    except ValidationError as e:
        raise InvalidSpec(f"Invalid {model_info['kind']} specification: {e}") from e


def dump_resource(emqx):
    return emqx.model_dump(mode="json", exclude_none=True)


def build_patch(original, mutated):
    """Return the parts of ``mutated`` that are new or differ from ``original``."""
    patch = {}
    for key, value in mutated.items():
        current = original.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            nested = build_patch(current, value)
            if nested:
                patch[key] = nested
        elif key not in original or current != value:
            patch[key] = value
    return patch


MUTATING_OPERATIONS = ["CREATE", "UPDATE"]


@kopf.on.mutate(
    GROUP,
    VERSION,
    "emqxbrokers",
    id="mutate-emqxbroker",
    operations=MUTATING_OPERATIONS,
)
@kopf.on.mutate(
    GROUP,
    VERSION,
    "emqxenterprises",
    id="mutate-emqxenterprise",
    operations=MUTATING_OPERATIONS,
)
def mutate_emqx(body, patch, resource, **kwargs):
    """Default emqx resources on CREATE and UPDATE."""
    original = dump_resource(load_resource(resource.plural, body))
    mutated = dump_resource(default(load_resource(resource.plural, body)))

    changes = build_patch(original, mutated)
    if changes:
        metadata = mutated["metadata"]
        name = metadata.get("name") or metadata.get("generateName")
        logger.debug(f"Defaulting patch for {name}: {changes}")
        patch.update(changes)


@kopf.on.validate(GROUP, VERSION, "emqxbrokers", id="validate-emqxbroker")
@kopf.on.validate(GROUP, VERSION, "emqxenterprises", id="validate-emqxenterprise")
def validate_emqx(body, operation, resource, old=None, **kwargs):
    """Accept or reject emqx resources; a rejection is raised as kopf.AdmissionError."""
    if operation == "DELETE":
        # A stored object that no longer fits the model must still be deletable
        stored = body or old
        try:
            emqx = load_resource(resource.plural, stored) if stored else None
        except InvalidSpec as e:
            logger.warning(f"Allowing delete of unparseable resource: {e.reason}")
            return
        if emqx is not None:
            validate_delete(emqx)
        return

    emqx = load_resource(resource.plural, body)

    if operation == "UPDATE":
        if not old:
            logger.warning(
                f"No previous object for update of {emqx.get_name()}, "
                "validating as create"
            )
            validate_create(emqx)
            return
        validate_update(emqx, load_resource(resource.plural, old))
        return

    validate_create(emqx)
