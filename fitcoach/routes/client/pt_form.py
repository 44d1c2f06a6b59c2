from flask import current_app, jsonify, request
from marshmallow import ValidationError

from domain.access.schemas import Capability
from fitcoach.extensions import db
from fitcoach.models import PTForm
from fitcoach.schemas.pt_form import pt_form_input_schema, pt_form_schema
from fitcoach.services.access import request_now
from fitcoach.utils.decorators import requires_capability

from . import client_bp


@client_bp.route("/pt-form", methods=["GET"])
@requires_capability(Capability.SUBMIT_PT_FORM)
def get_pt_form(current_user):
    form = current_user.pt_forms.order_by(PTForm.created_at.desc(), PTForm.id.desc()).first()
    return jsonify({"ptForm": pt_form_schema.dump(form) if form else None}), 200


@client_bp.route("/pt-form", methods=["POST"])
@requires_capability(Capability.SUBMIT_PT_FORM)
def submit_pt_form(current_user):
    try:
        data = pt_form_input_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"msg": "Invalid PT form", "errors": err.messages}), 400

    now = request_now()
    form = PTForm(user_id=current_user.id, created_at=now, updated_at=now, **data)
    db.session.add(form)
    db.session.commit()
    current_app.logger.info("pt_form_submitted user_id=%s form_id=%s", current_user.id, form.id)
    return jsonify({"msg": "PT form created", "ptForm": pt_form_schema.dump(form)}), 201
