from flask import current_app, jsonify

from domain.access.schemas import Capability
from fitcoach.services.access import check_access, entitlement_resolver, request_now
from fitcoach.utils.decorators import with_current_user

from . import client_bp


@client_bp.route("/user/subscription", methods=["GET"])
@with_current_user
def active_package(current_user):
    entitlement = entitlement_resolver().resolve_or_none(current_user.id, request_now())
    return jsonify({"activePackage": entitlement.to_json() if entitlement else None}), 200


@client_bp.route("/access/<capability>", methods=["GET"])
@with_current_user
def access_check(capability, current_user):
    """Is the user entitled right now? Answers with the upsell redirect when not."""
    try:
        capability = Capability.parse(capability)
    except ValueError:
        return jsonify({"msg": f"Unknown capability: {capability}"}), 404

    decision = check_access(current_user.id, capability)
    if not decision.allowed:
        current_app.logger.info(
            "access_check_denied user_id=%s capability=%s", current_user.id, capability.value
        )
    return jsonify(decision.to_json()), 200
