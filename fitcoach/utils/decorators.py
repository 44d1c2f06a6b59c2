# fitcoach/utils/decorators.py
from functools import wraps
from urllib.parse import urlencode

from flask import current_app, g, jsonify, redirect, request
from flask_jwt_extended import get_jwt_identity, jwt_required, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import InvalidTokenError

from domain.access.schemas import Capability
from fitcoach.extensions import db
from fitcoach.models.user import User
from fitcoach.services.access import check_access


def _load_user(identity):
    if identity is None:
        return None
    user = db.session.get(User, int(identity))
    if not user or not user.is_active:
        return None
    return user


def _optional_identity():
    """JWT identity of the request, or None when the token is missing, expired or invalid."""
    try:
        verify_jwt_in_request(optional=True)
    except (InvalidTokenError, JWTExtendedException) as e:
        current_app.logger.info("page_token_rejected path=%s: %s", request.path, e)
        return None
    return get_jwt_identity()


def with_current_user(view_func):
    """
    Resolve the JWT identity to an active User and pass it as ``current_user``.
    Requires a valid JWT token.
    """
    @wraps(view_func)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user = _load_user(get_jwt_identity())
        if not user:
            return jsonify({"msg": "User not found"}), 401
        kwargs['current_user'] = user
        return view_func(*args, **kwargs)
    return wrapper


def role_required(*roles):
    def decorator(view_func):
        @wraps(view_func)
        @with_current_user
        def wrapper(*args, **kwargs):
            if kwargs['current_user'].role not in roles:
                return jsonify({"msg": "Unauthorized"}), 403
            return view_func(*args, **kwargs)
        return wrapper
    return decorator


def _log_denial(user_id, decision):
    current_app.logger.info(
        "entitlement_denied user_id=%s capability=%s endpoint=%s",
        user_id, decision.capability.value, request.endpoint,
    )


def requires_capability(capability):
    """
    API adapter for the access gate: a denial becomes a 403 JSON response.
    Put it below the route decorator; it handles the JWT itself.
    """
    capability = Capability.parse(capability)

    def decorator(view_func):
        @wraps(view_func)
        @with_current_user
        def wrapper(*args, **kwargs):
            user = kwargs['current_user']
            decision = check_access(user.id, capability)
            if not decision.allowed:
                _log_denial(user.id, decision)
                return jsonify({
                    "msg": "No active package",
                    "error": "ENTITLEMENT_REQUIRED",
                    "capability": capability.value,
                    "redirect": decision.redirect_hint,
                }), 403
            g.entitlement = decision.entitlement
            return view_func(*args, **kwargs)
        return wrapper
    return decorator


def page_requires_capability(capability):
    """
    Page adapter for the access gate: redirects before anything is rendered.
    Anonymous visitors go to the login page, denied users to the upsell page.
    """
    capability = Capability.parse(capability)

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(*args, **kwargs):
            user = _load_user(_optional_identity())
            if not user:
                login_url = current_app.config["LOGIN_URL"]
                return redirect(f"{login_url}?{urlencode({'callbackUrl': request.path})}")

            decision = check_access(user.id, capability)
            if not decision.allowed:
                _log_denial(user.id, decision)
                return redirect(decision.redirect_hint)
            g.entitlement = decision.entitlement
            kwargs['current_user'] = user
            return view_func(*args, **kwargs)
        return wrapper
    return decorator
