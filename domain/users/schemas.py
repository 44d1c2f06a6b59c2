from enum import Enum
from typing import Optional

from domain.base import CamelModel


class UserRole(str, Enum):
    client = "client"
    trainer = "trainer"
    admin = "admin"


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    avatar: Optional[str] = None
