from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import field_validator

from domain.base import CamelModel
from domain.packages.schemas import PackageSnapshot


class PurchaseStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


# Statuses that may still grant access while the validity window is open.
GRANTING_STATUSES = frozenset({PurchaseStatus.ACTIVE, PurchaseStatus.PENDING})


class PurchaseRecord(CamelModel):
    """One row of the purchase ledger as handed to the resolver."""

    id: int
    user_id: int
    package_id: int
    status: PurchaseStatus
    starts_at: datetime
    expires_at: datetime
    purchased_at: datetime
    amount: Optional[float] = None
    package: Optional[PackageSnapshot] = None

    @field_validator("status", mode="before")
    @classmethod
    def _upper_status(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_float(cls, value):
        if value is None:
            return None
        return float(value)


class Entitlement(CamelModel):
    id: int
    user_id: int
    status: PurchaseStatus
    purchased_at: datetime
    starts_at: datetime
    expires_at: datetime
    remaining_days: int
    package: PackageSnapshot
