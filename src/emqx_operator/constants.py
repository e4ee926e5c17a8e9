"""Constants shared by the emqx models and webhooks."""

GROUP = "apps.emqx.io"
VERSION = "v1beta3"

MANAGED_BY_LABEL = "apps.emqx.io/managed-by"
INSTANCE_LABEL = "apps.emqx.io/instance"
MANAGED_BY = "emqx-operator"

# Always follow the owning resource, wherever they are copied to
RESERVED_LABELS = (MANAGED_BY_LABEL, INSTANCE_LABEL)

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "public"
