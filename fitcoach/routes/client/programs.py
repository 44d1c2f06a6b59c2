from flask import jsonify

from domain.access.schemas import Capability
from domain.programs.schemas import ProgramKind
from fitcoach.services.access import program_resolver
from fitcoach.utils.decorators import requires_capability

from . import client_bp


def _current_program(client_id, kind):
    detail = program_resolver().current_detail(client_id, kind)
    return jsonify({"program": detail.to_json() if detail else None}), 200


@client_bp.route("/client/workout-program", methods=["GET"])
@requires_capability(Capability.VIEW_WORKOUT)
def workout_program(current_user):
    return _current_program(current_user.id, ProgramKind.WORKOUT)


@client_bp.route("/client/nutrition-program", methods=["GET"])
@requires_capability(Capability.VIEW_NUTRITION)
def nutrition_program(current_user):
    return _current_program(current_user.id, ProgramKind.NUTRITION)


@client_bp.route("/client/supplements", methods=["GET"])
@requires_capability(Capability.VIEW_SUPPLEMENT)
def supplement_program(current_user):
    return _current_program(current_user.id, ProgramKind.SUPPLEMENT)
