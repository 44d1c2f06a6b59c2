from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from domain.clock import to_aware_utc


class CamelModel(BaseModel):
    """Engine value type serialized with the camelCase field names the presentation layer reads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def _utc_datetimes(cls, value):
        if isinstance(value, datetime):
            return to_aware_utc(value)
        return value

    def to_json(self):
        return self.model_dump(mode="json", by_alias=True)
