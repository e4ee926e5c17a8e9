"""Handler modules for the emqx operator."""

# Import handlers so their kopf decorators register them
from . import admission_handler

__all__ = ["admission_handler"]
