import copy

import pytest

from emqx_operator.webhooks import (
    ImmutableFieldViolation,
    InvalidSpec,
    validate_create,
    validate_delete,
    validate_update,
)
from emqx_operator.webhooks.validation import parse_image, validate_image_tag


def test_create_with_secret_license(make_enterprise):
    validate_create(make_enterprise(license={"secretName": "s", "data": None}))


def test_create_with_inline_license(make_enterprise):
    validate_create(make_enterprise(license={"stringData": "license-content"}))


@pytest.mark.parametrize(
    "emqx_license",
    [
        {"secretName": "s", "stringData": {"k": "v"}},
        {"secretName": "s", "data": "bGljZW5zZQ=="},
        {"secretName": "s", "data": "bGljZW5zZQ==", "stringData": "license"},
    ],
)
def test_create_rejects_secret_and_inline_license(make_enterprise, emqx_license):
    with pytest.raises(InvalidSpec, match="can only set one"):
        validate_create(make_enterprise(license=emqx_license))


def test_broker_has_no_license_check(make_broker):
    validate_create(make_broker())


@pytest.mark.parametrize(
    "image",
    [
        "emqx/emqx-ee:4.4.8",
        "emqx/emqx-ee:latest",
        "emqx/emqx-ee",
        "emqx/emqx-ee:v4.4.0",
        "emqx/emqx-ee:4.4",
        "docker.io/emqx/emqx-ee:4.4.14",
        "localhost:5000/emqx/emqx-ee:5.0.1",
        "emqx/emqx-ee@sha256:" + "a" * 64,
    ],
)
def test_accepted_images(make_enterprise, image):
    validate_create(make_enterprise(image=image))


def test_unset_image_is_accepted(make_enterprise):
    emqx = make_enterprise()
    emqx.spec.emqxTemplate.image = None

    validate_image_tag(emqx)


@pytest.mark.parametrize(
    "image, message",
    [
        ("emqx/emqx-ee:4.3.9", "at least 4.4.0"),
        ("emqx/emqx-ee:v4.2", "at least 4.4.0"),
        ("EMQX/emqx-ee:4.4.8", "invalid image reference"),
        ("emqx/emqx ee:4.4.8", "invalid image reference"),
        ("emqx/emqx-ee:", "invalid image reference"),
    ],
)
def test_rejected_images(make_enterprise, image, message):
    with pytest.raises(InvalidSpec, match=message):
        validate_create(make_enterprise(image=image))


def test_parse_image_splits_registry():
    parts = parse_image("registry.example.com:5000/iot/emqx-ee:4.4.8")

    assert parts["registry"] == "registry.example.com:5000"
    assert parts["repository"] == "iot/emqx-ee"
    assert parts["tag"] == "4.4.8"


def test_update_with_unchanged_fields(make_enterprise, persistent):
    old = make_enterprise(username="admin", password="public", persistent=persistent)
    new = make_enterprise(
        username="admin", password="public", persistent=dict(persistent)
    )
    new.spec.replicas = 5

    validate_update(new, old)


def test_update_rejects_username_change_first(make_enterprise, persistent):
    """A username change is reported even if password and storage changed too."""
    old = make_enterprise(username="admin", password="public")
    new = make_enterprise(
        username="root",
        password="changed",
        persistent=persistent,
        license={"secretName": "s", "stringData": "license"},
    )

    with pytest.raises(ImmutableFieldViolation, match="username"):
        validate_update(new, old)


def test_update_rejects_password_change(make_broker):
    old = make_broker(username="admin", password="public")
    new = make_broker(username="admin", password="changed")

    with pytest.raises(ImmutableFieldViolation, match="password"):
        validate_update(new, old)


def test_update_image_checked_before_credentials(make_broker):
    old = make_broker(username="admin")
    new = make_broker(username="root", image="emqx/emqx:4.3.0")

    with pytest.raises(InvalidSpec):
        validate_update(new, old)


def test_update_license_checked_before_persistent(make_enterprise, persistent):
    old = make_enterprise()
    new = make_enterprise(
        persistent=persistent, license={"secretName": "s", "data": "bGljZW5zZQ=="}
    )

    with pytest.raises(InvalidSpec):
        validate_update(new, old)


def test_update_rejects_persistent_change(make_enterprise, persistent):
    old = make_enterprise(persistent=persistent)
    changed = dict(persistent, resources={"requests": {"storage": "1Gi"}})
    new = make_enterprise(persistent=changed)

    with pytest.raises(ImmutableFieldViolation, match="persistent"):
        validate_update(new, old)


def test_update_rejects_adding_persistent(make_broker, persistent):
    with pytest.raises(ImmutableFieldViolation):
        validate_update(make_broker(persistent=persistent), make_broker())


def test_update_with_integer_storage_quantity(make_broker, persistent):
    persistent["resources"] = {"requests": {"storage": 20971520}}
    old = make_broker(persistent=persistent)
    new = make_broker(persistent=copy.deepcopy(persistent))

    assert old.get_persistent().resources.requests == {"storage": 20971520}
    validate_update(new, old)


def test_delete_always_allowed(make_enterprise):
    emqx = make_enterprise(
        image="emqx/emqx-ee:1.0.0", license={"secretName": "s", "stringData": "x"}
    )

    validate_delete(emqx)
