"""Base classes for CRD specifications."""

from pydantic import BaseModel, Field
from typing import Optional, Dict


class CRDMetadata(BaseModel):
    """Standard Kubernetes metadata for CRDs."""

    name: Optional[str] = None
    generateName: Optional[str] = None
    namespace: Optional[str] = None
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None

    class Config:
        extra = "allow"


class CRDSpec(BaseModel):
    """Base class for all CRD spec objects.

    Unknown fields are kept so that a resource handed over by the API server
    survives a round trip through the models unchanged.
    """

    class Config:
        extra = "allow"
        validate_assignment = True


class CRDResource(BaseModel):
    """Base class for a full custom resource (apiVersion, kind, metadata, spec)."""

    apiVersion: Optional[str] = None
    kind: Optional[str] = None
    metadata: CRDMetadata = Field(..., description="Standard object metadata")

    class Config:
        extra = "allow"
        validate_assignment = True
