from fitcoach.extensions import ma


def camelcase(name):
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class CamelCaseMixin:
    """Expose snake_case attributes under the camelCase keys the front end uses."""

    def on_bind_field(self, field_name, field_obj):
        field_obj.data_key = camelcase(field_obj.data_key or field_name)


class CamelCaseSchema(CamelCaseMixin, ma.Schema):
    pass
