from flask import current_app, jsonify

from domain.dashboard.services import compute_trainer_dashboard
from fitcoach.services.access import request_now
from fitcoach.services.dashboard_sources import dashboard_source_for
from fitcoach.utils.decorators import role_required

from . import trainer_bp


def dashboard_response(user):
    source = dashboard_source_for(user)
    if source is None:
        return jsonify({"msg": "Unauthorized"}), 403

    config = current_app.config
    snapshot = compute_trainer_dashboard(
        source,
        request_now(),
        recent_limit=config["DASHBOARD_RECENT_LIMIT"],
        trend_months=config["DASHBOARD_TREND_MONTHS"],
        upcoming_days=config["DASHBOARD_UPCOMING_DAYS"],
    )
    if snapshot.diagnostics:
        current_app.logger.warning(
            "dashboard_partial user_id=%s sections=%s",
            user.id, [d.section for d in snapshot.diagnostics],
        )
    return jsonify(snapshot.to_json()), 200


@trainer_bp.route("/dashboard", methods=["GET"])
@role_required("trainer")
def dashboard(current_user):
    return dashboard_response(current_user)
