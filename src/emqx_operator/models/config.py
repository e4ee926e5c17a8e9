"""EMQX broker configuration defaulting."""

from typing import Dict

EmqxConfig = Dict[str, str]

DEFAULT_NAMESPACE = "default"

# Written only when the caller did not set the key.
SOFT_DEFAULTS = {
    "log.to": "console",
    "dashboard.listener.http": "18083",
    "management.listener.http": "8081",
    "listener.tcp.external": "1883",
    "listener.ssl.external": "8883",
    "listener.ws.external": "8083",
    "listener.wss.external": "8084",
}


def cluster_config(emqx) -> EmqxConfig:
    """Clustering keys the operator relies on; these always win over user values.

    The name-derived keys are left out while the resource has no name yet.
    """
    config = {
        "cluster.discovery": "dns",
        "cluster.dns.type": "srv",
        "listener.tcp.internal": "",
    }
    name = emqx.get_name()
    if not name:
        return config

    namespace = emqx.get_namespace() or DEFAULT_NAMESPACE
    config.update(
        {
            "name": name,
            "cluster.dns.app": name,
            "cluster.dns.name": (
                f"{emqx.get_headless_service_name()}.{namespace}.svc.cluster.local"
            ),
        }
    )
    return config


def default_config(config: EmqxConfig, emqx) -> EmqxConfig:
    """Merge the derived broker configuration into ``config`` in place."""
    config.update(cluster_config(emqx))
    for key, value in SOFT_DEFAULTS.items():
        config.setdefault(key, value)
    return config
