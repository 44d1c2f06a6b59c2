from flask import current_app, g

from domain.access.services import authorize
from domain.entitlements.services import EntitlementResolver
from domain.programs.services import ProgramResolver
from fitcoach.services.stores import ProgramStore, PurchaseLedger


def request_now():
    """The request's single "now", read from the configured clock on first use."""
    if "now" not in g:
        g.now = current_app.config["CLOCK"].now()
    return g.now


def entitlement_resolver():
    return EntitlementResolver(PurchaseLedger())


def program_resolver():
    return ProgramResolver(ProgramStore())


def check_access(user_id, capability):
    return authorize(
        entitlement_resolver(),
        user_id,
        capability,
        request_now(),
        upsell_url=current_app.config["UPSELL_URL"],
    )
