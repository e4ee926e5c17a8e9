"""Mutating webhook: fills unset fields of emqx resources with defaults."""

import logging

from emqx_operator.constants import (
    DEFAULT_PASSWORD,
    DEFAULT_USERNAME,
    INSTANCE_LABEL,
    MANAGED_BY,
    MANAGED_BY_LABEL,
)
from emqx_operator.models.config import default_config
from emqx_operator.models.emqx import PodSecurityContext
from emqx_operator.models.service import default_service_template

logger = logging.getLogger(__name__)

EMQX_USER_GROUP = 1000
FS_GROUP_CHANGE_ALWAYS = "Always"


def default_security_context():
    return PodSecurityContext(
        runAsUser=EMQX_USER_GROUP,
        runAsGroup=EMQX_USER_GROUP,
        fsGroup=EMQX_USER_GROUP,
        fsGroupChangePolicy=FS_GROUP_CHANGE_ALWAYS,
        supplementalGroups=[EMQX_USER_GROUP],
    )


def default(emqx):
    """Apply defaults to an EmqxBroker or EmqxEnterprise in place.

    The reserved labels are always overwritten, whatever the caller set. A
    security context supplied by the caller is kept as is, never merged.
    """
    logger.info(f"default: {emqx.get_name()}")

    labels = dict(emqx.metadata.labels or {})
    labels[MANAGED_BY_LABEL] = MANAGED_BY
    labels[INSTANCE_LABEL] = emqx.get_name() or ""
    emqx.metadata.labels = labels

    template = emqx.template
    if template.config is None:
        template.config = {}
    default_config(template.config, emqx)
    default_service_template(template.serviceTemplate, emqx)

    if template.securityContext is None:
        template.securityContext = default_security_context()

    if not template.username:
        template.username = DEFAULT_USERNAME
    if not template.password:
        template.password = DEFAULT_PASSWORD

    return emqx
