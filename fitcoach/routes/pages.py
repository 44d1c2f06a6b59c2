"""
Server-side guards for the package-gated client pages.

The guard runs before anything is rendered: a denied visitor is redirected to
the upsell page with ``source=<capability>``. Allowed requests get the page
bootstrap the front end renders from.
"""
from flask import Blueprint, g, jsonify

from domain.access.schemas import Capability
from domain.users.schemas import UserOut
from fitcoach.utils.decorators import page_requires_capability

pages_bp = Blueprint('pages', __name__)


def _bootstrap(page, user):
    entitlement = g.get("entitlement")
    return jsonify({
        "page": page,
        "user": UserOut(
            id=user.id,
            name=user.display_name,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
            avatar=user.profile.avatar if user.profile else None,
        ).to_json(),
        "activePackage": entitlement.to_json() if entitlement else None,
    }), 200


@pages_bp.route("/workout")
@page_requires_capability(Capability.VIEW_WORKOUT)
def workout_page(current_user):
    return _bootstrap("workout", current_user)


@pages_bp.route("/nutrition")
@page_requires_capability(Capability.VIEW_NUTRITION)
def nutrition_page(current_user):
    return _bootstrap("nutrition", current_user)


@pages_bp.route("/supplements")
@page_requires_capability(Capability.VIEW_SUPPLEMENT)
def supplements_page(current_user):
    return _bootstrap("supplements", current_user)


@pages_bp.route("/progress")
@page_requires_capability(Capability.VIEW_PROGRESS)
def progress_page(current_user):
    return _bootstrap("progress", current_user)


@pages_bp.route("/pt-form")
@page_requires_capability(Capability.SUBMIT_PT_FORM)
def pt_form_page(current_user):
    return _bootstrap("pt-form", current_user)
