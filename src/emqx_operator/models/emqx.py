"""EmqxBroker and EmqxEnterprise CRD models."""

from abc import ABC, abstractmethod
from pydantic import Field
from typing import List, Optional, Dict, Any, Union

from emqx_operator.constants import GROUP, VERSION
from emqx_operator.crd.registry import CRDRegistry
from emqx_operator.crd.base import CRDSpec, CRDResource
from emqx_operator.models.config import EmqxConfig
from emqx_operator.models.service import ServiceTemplate


class PodSecurityContext(CRDSpec):
    """Process identity and permission settings for the broker pods."""

    runAsUser: Optional[int] = None
    runAsGroup: Optional[int] = None
    runAsNonRoot: Optional[bool] = None
    fsGroup: Optional[int] = None
    fsGroupChangePolicy: Optional[str] = Field(
        default=None, description="'Always' or 'OnRootMismatch'"
    )
    supplementalGroups: Optional[List[int]] = None


class ResourceRequirements(CRDSpec):
    """Storage requests and limits; quantities are int or string."""

    requests: Optional[Dict[str, Union[int, str]]] = None
    limits: Optional[Dict[str, Union[int, str]]] = None


class PersistentVolumeClaimSpec(CRDSpec):
    """Durable storage for the broker data directory."""

    accessModes: Optional[List[str]] = None
    storageClassName: Optional[str] = None
    resources: Optional[ResourceRequirements] = None
    volumeMode: Optional[str] = None
    volumeName: Optional[str] = None
    selector: Optional[Dict[str, Any]] = None
    dataSource: Optional[Dict[str, Any]] = None


class EmqxLicense(CRDSpec):
    """EMQX Enterprise license, either a secret reference or inline material."""

    secretName: Optional[str] = Field(
        default=None, description="Name of a secret holding the license"
    )
    data: Optional[Union[str, Dict[str, str]]] = Field(
        default=None, description="Base64 encoded license file"
    )
    stringData: Optional[Union[str, Dict[str, str]]] = Field(
        default=None, description="License file content"
    )


class EmqxTemplate(CRDSpec):
    """Pod template shared by all emqx resources."""

    image: Optional[str] = Field(default=None, description="EMQX image")
    imagePullPolicy: Optional[str] = None
    username: str = Field(default="", description="Dashboard admin username")
    password: str = Field(default="", description="Dashboard admin password")
    config: Optional[EmqxConfig] = Field(
        default=None, description="EMQX configuration (emqx.conf keys)"
    )
    serviceTemplate: ServiceTemplate = Field(default_factory=ServiceTemplate)
    securityContext: Optional[PodSecurityContext] = None
    persistent: Optional[PersistentVolumeClaimSpec] = None


class EmqxEnterpriseTemplate(EmqxTemplate):
    """Pod template for EMQX Enterprise, which also carries a license."""

    license: EmqxLicense = Field(default_factory=EmqxLicense)


class EmqxBrokerSpec(CRDSpec):
    """EmqxBroker CRD specification."""

    replicas: Optional[int] = Field(default=None, description="Number of nodes")
    emqxTemplate: EmqxTemplate = Field(default_factory=EmqxTemplate)


class EmqxEnterpriseSpec(CRDSpec):
    """EmqxEnterprise CRD specification."""

    replicas: Optional[int] = Field(default=None, description="Number of nodes")
    emqxTemplate: EmqxEnterpriseTemplate = Field(
        default_factory=EmqxEnterpriseTemplate
    )


class Emqx(ABC):
    """Capabilities shared by every emqx resource variant."""

    @abstractmethod
    def get_name(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_namespace(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_labels(self) -> Optional[Dict[str, str]]:
        pass

    @abstractmethod
    def get_image(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_username(self) -> str:
        pass

    @abstractmethod
    def get_password(self) -> str:
        pass

    @abstractmethod
    def get_persistent(self) -> Optional[PersistentVolumeClaimSpec]:
        pass

    @abstractmethod
    def get_config(self) -> Optional[EmqxConfig]:
        pass

    def get_headless_service_name(self) -> Optional[str]:
        # no name yet when the API server is still to apply generateName
        name = self.get_name()
        if not name:
            return None
        return f"{name}-headless"


class EmqxResource(CRDResource, Emqx):
    """Accessors backed by ``spec.emqxTemplate``, common to both kinds."""

    @property
    def template(self):
        return self.spec.emqxTemplate

    def get_name(self):
        return self.metadata.name

    def get_namespace(self):
        return self.metadata.namespace

    def get_labels(self):
        return self.metadata.labels

    def get_image(self):
        return self.template.image

    def get_username(self):
        return self.template.username

    def get_password(self):
        return self.template.password

    def get_persistent(self):
        return self.template.persistent

    def get_config(self):
        return self.template.config


@CRDRegistry.register(GROUP, VERSION, "EmqxBroker", "emqxbrokers")
class EmqxBroker(EmqxResource):
    """EMQX open source broker cluster."""

    spec: EmqxBrokerSpec = Field(default_factory=EmqxBrokerSpec)


@CRDRegistry.register(GROUP, VERSION, "EmqxEnterprise", "emqxenterprises")
class EmqxEnterprise(EmqxResource):
    """EMQX Enterprise broker cluster."""

    spec: EmqxEnterpriseSpec = Field(default_factory=EmqxEnterpriseSpec)

    def get_license(self) -> EmqxLicense:
        return self.template.license
