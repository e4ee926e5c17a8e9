"""Pydantic models for the emqx CRDs."""

# Import all models to ensure they're registered
from . import config
from . import emqx
from . import service

__all__ = ["config", "emqx", "service"]
