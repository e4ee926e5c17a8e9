"""CRD model base classes and registry for the emqx operator."""

from .registry import CRDRegistry
from .base import CRDSpec, CRDResource, CRDMetadata

__all__ = ["CRDRegistry", "CRDSpec", "CRDResource", "CRDMetadata"]
