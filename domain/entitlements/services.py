import logging
import math
from datetime import timedelta

from domain.entitlements.schemas import (
    Entitlement,
    GRANTING_STATUSES,
    PurchaseStatus,
)
from domain.errors import DataIntegrityError

logger = logging.getLogger(__name__)

DAY = timedelta(days=1)


def calculate_expiry(duration_in_days, start):
    return start + timedelta(days=max(duration_in_days or 0, 0))


def remaining_days(expires_at, now):
    """Whole days left, rounded up; 0 once expired."""
    diff = expires_at - now
    if diff <= timedelta(0):
        return 0
    return math.ceil(diff / DAY)


def is_valid_at(purchase, now):
    return purchase.status in GRANTING_STATUSES and purchase.expires_at > now


def _priority(purchase):
    return (purchase.expires_at, purchase.purchased_at, purchase.id)


def select_active_purchase(purchases, now):
    """
    Pick the purchase that counts as the user's entitlement.

    Only ACTIVE/PENDING purchases whose window is still open are candidates.
    The one expiring furthest in the future wins; identical expiries fall back
    to the most recent purchase. Status itself is never a tie-break.
    """
    candidates = [p for p in purchases if is_valid_at(p, now)]
    if not candidates:
        return None
    return max(candidates, key=_priority)


def build_entitlement(purchase, now):
    if purchase.package is None:
        raise DataIntegrityError(
            f"Purchase {purchase.id} references missing package {purchase.package_id}",
            entity="package",
            entity_id=purchase.package_id,
        )
    return Entitlement(
        id=purchase.id,
        user_id=purchase.user_id,
        status=purchase.status,
        purchased_at=purchase.purchased_at,
        starts_at=purchase.starts_at,
        expires_at=purchase.expires_at,
        remaining_days=remaining_days(purchase.expires_at, now),
        package=purchase.package,
    )


def resolve_active_entitlement(purchases, now):
    """Entitlement for one user's purchases, or None. Raises DataIntegrityError."""
    winner = select_active_purchase(purchases, now)
    if winner is None:
        return None
    return build_entitlement(winner, now)


def first_valid_per_user(purchases, now):
    """
    Single pass over purchases for many users; the best candidate per user wins.

    Input order does not matter: each user's slot is replaced only by a purchase
    with a strictly higher (expires_at, purchased_at) priority.
    """
    winners = {}
    for purchase in purchases:
        if not is_valid_at(purchase, now):
            continue
        current = winners.get(purchase.user_id)
        if current is None or _priority(purchase) > _priority(current):
            winners[purchase.user_id] = purchase
    return winners


def entitlement_payment_status(entitlement):
    if entitlement is None:
        return "unknown"
    if entitlement.status == PurchaseStatus.ACTIVE:
        return "paid"
    if entitlement.status == PurchaseStatus.PENDING:
        return "pending"
    return "unknown"


class EntitlementResolver:
    """Reads the purchase ledger and resolves entitlements against one "now"."""

    def __init__(self, ledger):
        self.ledger = ledger

    def resolve(self, user_id, now):
        if not user_id:
            return None
        purchases = self.ledger.fetch_purchases([user_id])
        return resolve_active_entitlement(purchases, now)

    def resolve_or_none(self, user_id, now):
        """Like resolve(), but integrity failures fail closed and are logged."""
        try:
            return self.resolve(user_id, now)
        except DataIntegrityError as e:
            logger.warning(
                "entitlement_integrity_error user_id=%s entity=%s entity_id=%s: %s",
                user_id, e.entity, e.entity_id, e,
            )
            return None

    def resolve_many(self, user_ids, now):
        user_ids = list(dict.fromkeys(user_ids))
        result = {user_id: None for user_id in user_ids}
        if not user_ids:
            return result

        winners = first_valid_per_user(self.ledger.fetch_purchases(user_ids), now)
        for user_id, purchase in winners.items():
            if user_id not in result:
                continue
            try:
                result[user_id] = build_entitlement(purchase, now)
            except DataIntegrityError as e:
                logger.warning("entitlement_integrity_error user_id=%s: %s", user_id, e)
        return result
