"""EMQX operator admission webhooks."""

__version__ = "0.1.0"
