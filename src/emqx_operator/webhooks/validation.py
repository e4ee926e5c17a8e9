"""Validating webhook: gates create, update and delete of emqx resources.

Every check is a pure predicate over the submitted objects. Checks run in a
fixed order and the first failure rejects the whole request; later checks are
not evaluated. The order matters to callers, since it decides which reason is
reported when several rules are broken at once.
"""

import logging
import re

from emqx_operator.utils import deep_equal
from emqx_operator.webhooks.errors import (
    ImmutableFieldViolation,
    InvalidSpec,
    RejectionError,
)

logger = logging.getLogger(__name__)

MINIMUM_VERSION = (4, 4, 0)

# [registry[:port]/]path[:tag][@digest], path components lowercase.
IMAGE_REFERENCE = re.compile(
    r"^(?:(?P<registry>[a-zA-Z0-9.-]+(?::[0-9]+)?)/)?"
    r"(?P<repository>[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*"
    r"(?:/[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*)*)"
    r"(?::(?P<tag>[\w][\w.-]{0,127}))?"
    r"(?:@(?P<digest>[a-z0-9]+(?:[+._-][a-z0-9]+)*:[a-fA-F0-9]{32,}))?$"
)
VERSION_TAG = re.compile(
    r"^v?(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?(?:[-+].*)?$"
)


def parse_image(image):
    """Split an image reference into its parts, or return None if malformed."""
    match = IMAGE_REFERENCE.match(image)
    if match is None:
        return None
    parts = match.groupdict()
    # 'host/repo' without a dot, port or 'localhost' is a repository path
    registry = parts["registry"]
    if registry and not ("." in registry or ":" in registry or registry == "localhost"):
        if registry != registry.lower():
            return None
        parts["repository"] = f"{registry}/{parts['repository']}"
        parts["registry"] = None
    return parts


def tag_version(tag):
    """Return the (major, minor, patch) of a version tag, or None for other tags."""
    match = VERSION_TAG.match(tag)
    if match is None:
        return None
    return (
        int(match.group("major")),
        int(match.group("minor")),
        int(match.group("patch") or 0),
    )


def validate_image_tag(emqx):
    """Reject malformed image references and EMQX versions below 4.4.0."""
    image = emqx.get_image()
    if not image:
        return

    parts = parse_image(image)
    if parts is None:
        raise InvalidSpec(f"invalid image reference {image!r}")

    tag = parts["tag"]
    if not tag:
        return
    version = tag_version(tag)
    if version is not None and version < MINIMUM_VERSION:
        minimum = ".".join(str(v) for v in MINIMUM_VERSION)
        raise InvalidSpec(
            f"the version of EMQX must be at least {minimum}, got {tag!r}"
        )


def validate_username_and_password(new, old):
    if new.get_username() != old.get_username():
        raise ImmutableFieldViolation("refuse to update username")
    if new.get_password() != old.get_password():
        raise ImmutableFieldViolation("refuse to update password")


def validate_license(emqx):
    """A license is either a secret reference or inline data, never both."""
    get_license = getattr(emqx, "get_license", None)
    if get_license is None:
        return

    emqx_license = get_license()
    if emqx_license.secretName and (emqx_license.data or emqx_license.stringData):
        raise InvalidSpec("secretName or data and stringData can only set one")


def validate_persistent(new, old):
    if not deep_equal(new.get_persistent(), old.get_persistent()):
        raise ImmutableFieldViolation("refuse to update persistent")


def validate_create(emqx):
    logger.info(f"validate create: {emqx.get_name()}")

    try:
        validate_image_tag(emqx)
        validate_license(emqx)
    except RejectionError as e:
        logger.error(f"validate create failed: {emqx.get_name()}: {e.reason}")
        raise


def validate_update(emqx, old):
    logger.info(f"validate update: {emqx.get_name()}")

    try:
        validate_image_tag(emqx)
        validate_username_and_password(emqx, old)
        validate_license(emqx)
        validate_persistent(emqx, old)
    except RejectionError as e:
        logger.error(f"validate update failed: {emqx.get_name()}: {e.reason}")
        raise


def validate_delete(emqx):
    """Deletion is always allowed."""
    logger.info(f"validate delete: {emqx.get_name()}")
