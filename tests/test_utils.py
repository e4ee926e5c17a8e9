from emqx_operator.crd.registry import CRDRegistry
from emqx_operator.models.emqx import (
    EmqxBroker,
    EmqxEnterprise,
    PersistentVolumeClaimSpec,
    ResourceRequirements,
)
from emqx_operator.utils import deep_equal


def test_deep_equal_models():
    left = PersistentVolumeClaimSpec(
        accessModes=["ReadWriteOnce"],
        resources=ResourceRequirements(requests={"storage": "20Mi"}),
    )
    right = PersistentVolumeClaimSpec.model_validate(
        {"accessModes": ["ReadWriteOnce"], "resources": {"requests": {"storage": "20Mi"}}}
    )

    assert left is not right
    assert deep_equal(left, right)


def test_deep_equal_detects_nested_difference():
    left = PersistentVolumeClaimSpec(selector={"matchLabels": {"tier": "a"}})
    right = PersistentVolumeClaimSpec(selector={"matchLabels": {"tier": "b"}})

    assert not deep_equal(left, right)


def test_deep_equal_includes_extra_fields():
    left = PersistentVolumeClaimSpec.model_validate({"volumeAttributesClassName": "x"})
    right = PersistentVolumeClaimSpec()

    assert not deep_equal(left, right)


def test_deep_equal_none_and_empty_differ():
    assert deep_equal(None, None)
    assert not deep_equal(None, PersistentVolumeClaimSpec())
    assert not deep_equal({}, None)
    assert not deep_equal([], None)


def test_deep_equal_plain_values():
    assert deep_equal({"a": [1, {"b": "c"}]}, {"a": [1, {"b": "c"}]})
    assert not deep_equal({"a": [1, 2]}, {"a": [2, 1]})
    assert not deep_equal({"a": 1}, {"a": 1, "b": 2})
    assert not deep_equal(1, "1")
    assert not deep_equal(1, True)


def test_registry_knows_both_kinds():
    registry = CRDRegistry()
    registry.discover_models()

    assert registry.get_model_by_key("apps.emqx.io", "v1beta3", "EmqxBroker")[
        "model"
    ] is EmqxBroker
    assert registry.get_model_by_plural("apps.emqx.io", "v1beta3", "emqxenterprises")[
        "model"
    ] is EmqxEnterprise
    assert registry.get_model_by_plural("apps.emqx.io", "v1beta3", "emqxs") is None


def test_registry_entry_fields():
    info = CRDRegistry().get_model_by_key("apps.emqx.io", "v1beta3", "EmqxBroker")

    assert set(info) == {"model", "group", "version", "kind", "plural"}
    assert info["plural"] == "emqxbrokers"
