import logging

from pydantic import ValidationError

from domain.dashboard.schemas import ClientLink, DashboardInput, Diagnostic, OrderRecord, QuestionRecord
from domain.dashboard.sources import DashboardDataSource
from domain.programs.schemas import ProgramKind
from domain.users.schemas import UserRole
from fitcoach.extensions import db
from fitcoach.models import ClientProfile, SupportQuestion, TrainerClient, TrainerOrder, User
from fitcoach.services.stores import ProgramStore, store_read

logger = logging.getLogger(__name__)


def _client_link(link_id, user, profile, is_active, join_date):
    return ClientLink(
        id=link_id,
        client_id=user.id,
        name=user.display_name,
        email=user.email,
        is_active=bool(is_active),
        join_date=join_date,
        last_activity=user.updated_at,
        program=profile.fitness_goal if profile else None,
        avatar=profile.avatar if profile else None,
    )


def _order_record(order):
    return OrderRecord(
        id=order.id,
        client_name=order.client_name,
        package_name=order.package_name,
        package_type=order.package_type,
        amount=order.amount,
        status=order.status,
        payment_status=order.payment_status,
        order_date=order.order_date,
        start_date=order.start_date,
    )


def _question_record(question):
    return QuestionRecord(id=question.id, status=question.status, priority=question.priority)


def _collect(section, rows, build, id_of, diagnostics):
    """Build one record per row; a row that does not validate is skipped and reported."""
    records = []
    for row in rows:
        try:
            records.append(build(row))
        except ValidationError as e:
            row_id = id_of(row)
            logger.warning("dashboard_row_skipped section=%s id=%s: %s", section, row_id, e)
            diagnostics.append(Diagnostic(
                section=section,
                error=type(e).__name__,
                message=f"row {row_id} skipped: {e.error_count()} invalid field(s)",
            ))
    return records


def _input(clients, orders, questions, active_programs):
    diagnostics = []
    return DashboardInput(
        clients=_collect("clients", clients, lambda c: _client_link(*c), lambda c: c[0], diagnostics),
        orders=_collect("orders", orders, _order_record, lambda o: o.id, diagnostics),
        questions=_collect("questions", questions, _question_record, lambda q: q.id, diagnostics),
        active_programs=active_programs,
        diagnostics=diagnostics,
    )


class TrainerDashboardSource(DashboardDataSource):
    """A trainer aggregates over their own roster, orders, programs and questions."""

    role = UserRole.trainer

    def __init__(self, trainer_id, programs=None):
        self.trainer_id = trainer_id
        self.programs = programs or ProgramStore()

    @store_read
    def load(self, now):
        links = db.session.query(TrainerClient, User, ClientProfile).join(
            User, User.id == TrainerClient.client_id
        ).outerjoin(
            ClientProfile, ClientProfile.user_id == User.id
        ).filter(TrainerClient.trainer_id == self.trainer_id).all()

        return _input(
            clients=[
                (link.id, user, profile, link.is_active, link.created_at)
                for link, user, profile in links
            ],
            orders=TrainerOrder.query.filter_by(trainer_id=self.trainer_id).all(),
            questions=SupportQuestion.query.filter_by(trainer_id=self.trainer_id).all(),
            active_programs={
                kind.value: self.programs.count_active(kind, trainer_id=self.trainer_id)
                for kind in ProgramKind
            },
        )


class AdminDashboardSource(DashboardDataSource):
    """Admins aggregate platform wide: every client account and every order."""

    role = UserRole.admin

    def __init__(self, programs=None):
        self.programs = programs or ProgramStore()

    @store_read
    def load(self, now):
        clients = db.session.query(User, ClientProfile).outerjoin(
            ClientProfile, ClientProfile.user_id == User.id
        ).filter(User.role == UserRole.client.value).all()

        return _input(
            clients=[
                (user.id, user, profile, user.is_active, user.created_at)
                for user, profile in clients
            ],
            orders=TrainerOrder.query.all(),
            questions=SupportQuestion.query.all(),
            active_programs={kind.value: self.programs.count_active(kind) for kind in ProgramKind},
        )


def dashboard_source_for(user):
    """Pick the role's data source once, at the request boundary. Clients get none."""
    if user is None or not user.is_active:
        return None
    if user.role == UserRole.trainer.value:
        return TrainerDashboardSource(user.id)
    if user.role == UserRole.admin.value:
        return AdminDashboardSource()
    return None
