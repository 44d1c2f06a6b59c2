from marshmallow import EXCLUDE, fields, validate

from fitcoach.extensions import ma
from fitcoach.models import PTForm
from fitcoach.schemas.base import CamelCaseMixin, CamelCaseSchema

EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced", "expert")


class PTFormInputSchema(CamelCaseSchema):
    class Meta:
        unknown = EXCLUDE

    workout_days_per_week = fields.Integer(required=True, validate=validate.Range(min=1, max=7))
    meal_frequency = fields.Integer(allow_none=True, validate=validate.Range(min=1, max=12))
    workout_location = fields.String(allow_none=True, validate=validate.OneOf(("home", "gym")))
    equipment_available = fields.String(
        allow_none=True, validate=validate.OneOf(("withEquipment", "withoutEquipment"))
    )
    experience = fields.String(load_default="beginner", validate=validate.OneOf(EXPERIENCE_LEVELS))
    health_conditions = fields.String(allow_none=True)
    injuries = fields.String(allow_none=True)
    medications = fields.String(allow_none=True)
    diet_restrictions = fields.String(allow_none=True)
    training_expectations = fields.String(allow_none=True)
    special_requests = fields.String(allow_none=True)
    agreed_to_terms = fields.Boolean(load_default=False)


class PTFormSchema(CamelCaseMixin, ma.SQLAlchemyAutoSchema):
    class Meta:
        model = PTForm
        include_fk = True


pt_form_input_schema = PTFormInputSchema()
pt_form_schema = PTFormSchema()
