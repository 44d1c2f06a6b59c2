from marshmallow import fields

from fitcoach.extensions import ma
from fitcoach.models import FitnessPackage
from fitcoach.schemas.base import CamelCaseMixin


class FitnessPackageSchema(CamelCaseMixin, ma.SQLAlchemyAutoSchema):
    class Meta:
        model = FitnessPackage
        exclude = ("created_at", "updated_at", "sort_order")

    price = fields.Float()
    original_price = fields.Float(allow_none=True)
    features = fields.List(fields.String())
    not_included = fields.List(fields.String())


package_schema = FitnessPackageSchema()
packages_schema = FitnessPackageSchema(many=True)
