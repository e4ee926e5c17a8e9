import copy

import pytest

from emqx_operator.models.emqx import EmqxBroker, EmqxEnterprise


def resource_body(kind, name, namespace, **template):
    return {
        "apiVersion": "apps.emqx.io/v1beta3",
        "kind": kind,
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"replicas": 3, "emqxTemplate": template},
    }


def enterprise_body(name="emqx-ee", namespace="emqx", **template):
    template.setdefault("image", "emqx/emqx-ee:4.4.8")
    return resource_body("EmqxEnterprise", name, namespace, **template)


def broker_body(name="emqx", namespace="emqx", **template):
    template.setdefault("image", "emqx/emqx:4.4.8")
    return resource_body("EmqxBroker", name, namespace, **template)


PERSISTENT = {
    "accessModes": ["ReadWriteOnce"],
    "storageClassName": "standard",
    "resources": {"requests": {"storage": "20Mi"}},
}


@pytest.fixture
def make_enterprise():
    def factory(**kwargs):
        return EmqxEnterprise.model_validate(enterprise_body(**kwargs))

    return factory


@pytest.fixture
def make_broker():
    def factory(**kwargs):
        return EmqxBroker.model_validate(broker_body(**kwargs))

    return factory


@pytest.fixture
def persistent():
    return copy.deepcopy(PERSISTENT)


@pytest.fixture
def enterprise_manifest():
    return enterprise_body


@pytest.fixture
def broker_manifest():
    return broker_body
