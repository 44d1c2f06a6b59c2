from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from domain.base import CamelModel


class Diagnostic(CamelModel):
    """A section or input row that could not be computed."""

    section: str
    error: str
    message: str


# ---------- inputs handed over by a dashboard data source ----------

class ClientLink(CamelModel):
    id: int
    client_id: int
    name: str
    email: str
    is_active: bool = True
    join_date: datetime
    last_activity: Optional[datetime] = None
    program: Optional[str] = None
    avatar: Optional[str] = None


class OrderRecord(CamelModel):
    id: int
    client_name: str
    package_name: str
    package_type: Optional[str] = None
    amount: float = 0.0
    status: Optional[str] = None
    payment_status: Optional[str] = None
    order_date: datetime
    start_date: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_float(cls, value):
        return float(value or 0)


class QuestionRecord(CamelModel):
    id: int
    status: Optional[str] = None
    priority: Optional[str] = None


class DashboardInput(CamelModel):
    clients: List[ClientLink] = []
    orders: List[OrderRecord] = []
    active_programs: Dict[str, int] = {}
    questions: List[QuestionRecord] = []
    # rows the source had to skip
    diagnostics: List[Diagnostic] = []


# ---------- snapshot returned to the presentation layer ----------

class DashboardMetrics(CamelModel):
    total_clients: int = 0
    active_clients: int = 0
    inactive_clients: int = 0
    new_clients_this_month: int = 0
    total_orders: int = 0
    completed_orders: int = 0
    pending_orders: int = 0
    total_revenue: float = 0.0
    pending_revenue: float = 0.0
    monthly_revenue: float = 0.0
    previous_month_revenue: float = 0.0
    revenue_change_percentage: Optional[float] = None
    average_revenue_per_client: Optional[float] = None


class Workload(CamelModel):
    active_workout_programs: int = 0
    active_diet_programs: int = 0
    active_supplement_programs: int = 0
    open_question_count: int = 0
    urgent_question_count: int = 0


class RevenueBucket(CamelModel):
    key: str
    label: str
    revenue: float
    orders: int


class ClientBucket(CamelModel):
    key: str
    label: str
    count: int


class RecentClient(CamelModel):
    id: int
    name: str
    email: str
    status: str
    join_date: datetime
    last_activity: Optional[datetime] = None
    program: Optional[str] = None
    avatar: Optional[str] = None


class RecentOrder(CamelModel):
    id: int
    client_name: str
    package_name: str
    package_type: Optional[str] = None
    amount: float
    status: Optional[str] = None
    payment_status: Optional[str] = None
    order_date: datetime


class UpcomingSession(CamelModel):
    id: int
    client_name: str
    package_name: str
    start_date: Optional[datetime] = None
    status: Optional[str] = None


class DashboardSnapshot(CamelModel):
    metrics: DashboardMetrics = Field(default_factory=DashboardMetrics)
    workload: Workload = Field(default_factory=Workload)
    revenue_trend: List[RevenueBucket] = []
    client_trend: List[ClientBucket] = []
    recent_clients: List[RecentClient] = []
    recent_orders: List[RecentOrder] = []
    upcoming_sessions: List[UpcomingSession] = []
    diagnostics: List[Diagnostic] = []
