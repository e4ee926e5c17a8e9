import kopf
import logging
import kubernetes
import os

from emqx_operator.crd.registry import CRDRegistry

# Registers the admission handlers through their decorators
from emqx_operator import handlers  # noqa: F401

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@kopf.on.startup()
def startup_fn(settings: kopf.OperatorSettings, **kwargs):
    """Configure the operator and its admission webhook server."""
    logger.info("EMQX Operator is starting up...")

    try:
        kubernetes.config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
    except kubernetes.config.ConfigException:
        try:
            kubernetes.config.load_kube_config()
            logger.info("Loaded local Kubernetes config")
        except Exception as e:
            logger.warning(f"Could not load Kubernetes config: {e}")

    registry = CRDRegistry()
    registry.discover_models()
    kinds = registry.list_registered_models()
    if not kinds:
        logger.error("No CRD models registered - webhooks have nothing to serve")
        raise RuntimeError("No CRD models available")

    settings.batching.worker_limit = int(os.getenv("WORKER_LIMIT", "5"))
    settings.posting.enabled = os.getenv("POSTING_ENABLED", "false").lower() == "true"
    settings.watching.server_timeout = int(os.getenv("SERVER_TIMEOUT", "60"))

    settings.admission.server = kopf.WebhookServer(
        port=webhook_port(),
        host=os.getenv("WEBHOOK_HOST"),
    )
    if should_manage_webhooks():
        settings.admission.managed = os.getenv(
            "WEBHOOK_CONFIG_NAME", "emqx.apps.emqx.io"
        )

    logger.info(f"Serving admission webhooks for: {kinds}")
    logger.info(f"Webhook port: {webhook_port()}")
    logger.info(f"Worker limit: {settings.batching.worker_limit}")
    logger.info("EMQX Operator startup complete")


@kopf.on.cleanup()
def cleanup_fn(**kwargs):
    logger.info("EMQX Operator is shutting down...")


def webhook_port() -> int:
    return int(os.getenv("WEBHOOK_PORT", "9443"))


def should_manage_webhooks() -> bool:
    """Determine if kopf should create the webhook configurations itself."""
    return os.getenv("WEBHOOK_MANAGED", "true").lower() == "true"


def main():
    try:
        kopf.run()
    except KeyboardInterrupt:
        logger.info("Operator stopped by user")
    except Exception as e:
        logger.error(f"Operator failed: {e}")
        raise


if __name__ == "__main__":
    main()
