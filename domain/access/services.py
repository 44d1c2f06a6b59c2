import logging

from domain.access.schemas import Capability, allow, deny
from domain.errors import DataIntegrityError

logger = logging.getLogger(__name__)


def decide(capability, entitlement, upsell_url="/packages"):
    """Pure decision: an entitlement of any package permits every capability."""
    capability = Capability.parse(capability)
    if entitlement is not None:
        return allow(capability, entitlement)
    return deny(capability, upsell_url)


def authorize(resolver, user_id, capability, now, upsell_url="/packages"):
    """
    Allow or Deny ``capability`` for ``user_id`` at ``now``.

    Transport agnostic: the caller turns a Deny into a redirect or a 403.
    Integrity errors fail closed and are indistinguishable from "no package".
    """
    capability = Capability.parse(capability)
    try:
        entitlement = resolver.resolve(user_id, now)
    except DataIntegrityError as e:
        logger.warning(
            "access_integrity_error user_id=%s capability=%s: %s",
            user_id, capability.value, e,
        )
        entitlement = None
    return decide(capability, entitlement, upsell_url)
