"""Service template model and its defaulting."""

import logging
from pydantic import Field
from typing import List, Optional, Dict

from emqx_operator.constants import RESERVED_LABELS
from emqx_operator.crd.base import CRDSpec

logger = logging.getLogger(__name__)

# Listener config keys exposed through the service, in port order, with the
# prefix used to name the generated port.
LISTENER_PORTS = [
    ("management.listener.http", "http-management"),
    ("dashboard.listener.http", "http-dashboard"),
    ("listener.tcp.external", "mqtt-tcp"),
    ("listener.ssl.external", "mqtt-ssl"),
    ("listener.ws.external", "mqtt-ws"),
    ("listener.wss.external", "mqtt-wss"),
]


class ServicePort(CRDSpec):
    """A single port exposed by the service."""

    name: Optional[str] = Field(default=None, description="Port name")
    protocol: str = Field(default="TCP", description="Port protocol")
    port: int = Field(..., description="Port exposed by the service")
    targetPort: Optional[int] = Field(
        default=None, description="Container port traffic is forwarded to"
    )
    nodePort: Optional[int] = Field(default=None, description="Node port")


class ServiceMetadata(CRDSpec):
    """Metadata of the generated service."""

    name: Optional[str] = None
    namespace: Optional[str] = None
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None


class ServiceSpec(CRDSpec):
    """Subset of the Kubernetes ServiceSpec the operator manages."""

    type: Optional[str] = Field(default=None, description="Service type")
    selector: Optional[Dict[str, str]] = Field(
        default=None, description="Pod selector"
    )
    ports: Optional[List[ServicePort]] = Field(
        default=None, description="Ports exposed by the service"
    )


class ServiceTemplate(CRDSpec):
    """Service-exposure configuration for the broker cluster."""

    metadata: ServiceMetadata = Field(default_factory=ServiceMetadata)
    spec: ServiceSpec = Field(default_factory=ServiceSpec)


def listener_port(value):
    """Return the port of a listener config value ('1883' or '0.0.0.0:1883').

    Returns None when the listener is disabled (empty value) or not numeric.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    port = value.rsplit(":", 1)[-1]
    if not port.isdigit():
        logger.debug(f"Ignoring non numeric listener value {value!r}")
        return None
    return int(port)


def default_service_template(template, emqx):
    """Fill in the service template of an emqx resource.

    Names and namespaces follow the owning resource. The resource labels fill
    in the template labels, which keep their own values except for the reserved
    keys, and become the selector. One port is added per enabled listener of
    the resource config. Ports the caller already declared are left as they are.
    """
    labels = dict(emqx.get_labels() or {})

    if not template.metadata.name:
        template.metadata.name = emqx.get_name()
    if not template.metadata.namespace:
        template.metadata.namespace = emqx.get_namespace()

    merged_labels = dict(labels)
    merged_labels.update(template.metadata.labels or {})
    for key in RESERVED_LABELS:
        if key in labels:
            merged_labels[key] = labels[key]
    template.metadata.labels = merged_labels

    template.spec.selector = labels

    ports = list(template.spec.ports or [])
    known_names = {port.name for port in ports if port.name}
    known_numbers = {port.port for port in ports}

    config = emqx.get_config() or {}
    for key, prefix in LISTENER_PORTS:
        number = listener_port(config.get(key))
        if number is None:
            continue
        name = f"{prefix}-{number}"
        if name in known_names or number in known_numbers:
            continue
        ports.append(ServicePort(name=name, port=number, targetPort=number))
        known_names.add(name)
        known_numbers.add(number)

    template.spec.ports = ports
    return template
