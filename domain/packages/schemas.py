from decimal import Decimal
from typing import List, Optional

from pydantic import field_validator

from domain.base import CamelModel


class PackageSnapshot(CamelModel):
    """Denormalized package fields carried by an entitlement."""

    id: int
    slug: str
    name: str
    headline: Optional[str] = None
    description: Optional[str] = None
    price: float
    currency: str = "TRY"
    duration_in_days: int
    features: List[str] = []
    not_included: List[str] = []
    is_active: bool = True

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_float(cls, value):
        if isinstance(value, Decimal):
            return float(value)
        return value

    @field_validator("features", "not_included", mode="before")
    @classmethod
    def _string_list(cls, value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]
