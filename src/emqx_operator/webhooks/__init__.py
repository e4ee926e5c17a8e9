"""Admission webhooks (defaulting and validation) for emqx resources."""

from .defaulting import default
from .errors import ImmutableFieldViolation, InvalidSpec, RejectionError
from .validation import validate_create, validate_delete, validate_update

__all__ = [
    "default",
    "validate_create",
    "validate_update",
    "validate_delete",
    "RejectionError",
    "InvalidSpec",
    "ImmutableFieldViolation",
]
