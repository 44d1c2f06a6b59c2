from fitcoach.routes.trainer.dashboard import dashboard_response
from fitcoach.utils.decorators import role_required

from . import admin_bp


@admin_bp.route("/dashboard", methods=["GET"])
@role_required("admin")
def dashboard(current_user):
    return dashboard_response(current_user)
