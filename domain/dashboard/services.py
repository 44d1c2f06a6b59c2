"""
Dashboard aggregation.

Every section is computed independently from one DashboardInput and one
``now``. A failing section falls back to its empty default and is reported in
``diagnostics``; nothing raised inside a section escapes compute_dashboard().
Rows the data source had to skip are reported there first.
"""
import calendar
import logging
from datetime import datetime, timedelta

from domain.dashboard.schemas import (
    ClientBucket,
    DashboardMetrics,
    DashboardSnapshot,
    Diagnostic,
    RecentClient,
    RecentOrder,
    RevenueBucket,
    UpcomingSession,
    Workload,
)

logger = logging.getLogger(__name__)

PAID = "paid"
PAYMENT_PENDING = "pending"
ORDER_COMPLETED = "completed"
OPEN_QUESTION_STATUSES = frozenset({"new", "waiting"})
URGENT_PRIORITY = "high"

RECENT_LIMIT = 6
TREND_MONTHS = 6
UPCOMING_DAYS = 7


# ---------- calendar months ----------

def month_start(dt):
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def shift_months(dt, months):
    """First instant of the month ``months`` away from dt's month."""
    index = dt.year * 12 + (dt.month - 1) + months
    return month_start(dt).replace(year=index // 12, month=index % 12 + 1)


def month_key(dt):
    return f"{dt.year}-{dt.month:02d}"


def month_label(dt):
    return f"{calendar.month_name[dt.month]} {dt.year}"


def in_month(dt, reference):
    return dt.year == reference.year and dt.month == reference.month


# ---------- metrics ----------

def revenue_change_percentage(current, previous):
    """Month over month change; None when there is no previous revenue to compare with."""
    if not previous or previous <= 0:
        return None
    return (current - previous) / previous * 100


def compute_metrics(data, now):
    clients = data.clients
    orders = data.orders
    previous_month = shift_months(now, -1)

    total_clients = len(clients)
    active_clients = sum(1 for c in clients if c.is_active)
    paid = [o for o in orders if o.payment_status == PAID]

    total_revenue = sum(o.amount for o in paid)
    monthly_revenue = sum(o.amount for o in paid if in_month(o.order_date, now))
    previous_month_revenue = sum(o.amount for o in paid if in_month(o.order_date, previous_month))

    return DashboardMetrics(
        total_clients=total_clients,
        active_clients=active_clients,
        inactive_clients=total_clients - active_clients,
        new_clients_this_month=sum(1 for c in clients if in_month(c.join_date, now)),
        total_orders=len(orders),
        completed_orders=sum(1 for o in orders if o.status == ORDER_COMPLETED),
        pending_orders=sum(1 for o in orders if o.payment_status == PAYMENT_PENDING),
        total_revenue=total_revenue,
        pending_revenue=sum(o.amount for o in orders if o.payment_status == PAYMENT_PENDING),
        monthly_revenue=monthly_revenue,
        previous_month_revenue=previous_month_revenue,
        revenue_change_percentage=revenue_change_percentage(monthly_revenue, previous_month_revenue),
        average_revenue_per_client=total_revenue / total_clients if total_clients else None,
    )


def compute_workload(data):
    open_questions = [q for q in data.questions if q.status in OPEN_QUESTION_STATUSES]
    return Workload(
        active_workout_programs=data.active_programs.get("workout", 0),
        active_diet_programs=data.active_programs.get("nutrition", 0),
        active_supplement_programs=data.active_programs.get("supplement", 0),
        open_question_count=len(open_questions),
        urgent_question_count=sum(1 for q in open_questions if q.priority == URGENT_PRIORITY),
    )


# ---------- trends ----------

def _trend_window(now, months):
    return shift_months(now, -(max(months, 1) - 1)), shift_months(now, 1)


def revenue_trend(orders, now, months=TREND_MONTHS):
    """
    Monthly revenue over the last ``months`` calendar months, oldest first.

    Revenue counts paid orders only; ``orders`` counts every order in the month.
    Months without any order are skipped, not zero-filled.
    """
    start, end = _trend_window(now, months)
    buckets = {}
    for order in orders:
        if not start <= order.order_date < end:
            continue
        key = month_key(order.order_date)
        bucket = buckets.setdefault(key, {"date": month_start(order.order_date), "revenue": 0.0, "orders": 0})
        bucket["orders"] += 1
        if order.payment_status == PAID:
            bucket["revenue"] += order.amount

    return [
        RevenueBucket(key=key, label=month_label(b["date"]), revenue=b["revenue"], orders=b["orders"])
        for key, b in sorted(buckets.items())
    ]


def client_trend(clients, now, months=TREND_MONTHS):
    """New clients per calendar month by join date, oldest first; empty months skipped."""
    start, end = _trend_window(now, months)
    counts = {}
    for client in clients:
        if not start <= client.join_date < end:
            continue
        key = month_key(client.join_date)
        date, count = counts.get(key, (month_start(client.join_date), 0))
        counts[key] = (date, count + 1)

    return [
        ClientBucket(key=key, label=month_label(date), count=count)
        for key, (date, count) in sorted(counts.items())
    ]


# ---------- top-N lists ----------

def top_n(items, date_of, limit):
    """Newest first by date, ties broken by id (descending), truncated to ``limit``."""
    return sorted(items, key=lambda item: (date_of(item), item.id), reverse=True)[:limit]


def recent_clients(clients, limit=RECENT_LIMIT):
    links = top_n(clients, lambda c: c.join_date, limit)
    return [
        RecentClient(
            id=link.client_id,
            name=link.name,
            email=link.email,
            status="active" if link.is_active else "inactive",
            join_date=link.join_date,
            last_activity=link.last_activity,
            program=link.program,
            avatar=link.avatar,
        )
        for link in links
    ]


def recent_orders(orders, limit=RECENT_LIMIT):
    return [
        RecentOrder(
            id=o.id,
            client_name=o.client_name,
            package_name=o.package_name,
            package_type=o.package_type,
            amount=o.amount,
            status=o.status,
            payment_status=o.payment_status,
            order_date=o.order_date,
        )
        for o in top_n(orders, lambda o: o.order_date, limit)
    ]


def _session_date(order):
    return order.start_date or order.order_date


def upcoming_sessions(orders, now, limit=RECENT_LIMIT, days=UPCOMING_DAYS):
    """Orders starting between the start of today and ``days`` days later."""
    window_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    window_end = window_start + timedelta(days=days)
    upcoming = [o for o in orders if window_start <= _session_date(o) <= window_end]
    return [
        UpcomingSession(
            id=o.id,
            client_name=o.client_name,
            package_name=o.package_name,
            start_date=_session_date(o),
            status=o.status,
        )
        for o in top_n(upcoming, _session_date, limit)
    ]


# ---------- assembly ----------

def _section(name, compute, default, diagnostics):
    try:
        return compute()
    except Exception as e:
        logger.exception("dashboard_section_failed section=%s", name)
        diagnostics.append(Diagnostic(section=name, error=type(e).__name__, message=str(e)))
        return default()


def compute_dashboard(data, now, recent_limit=RECENT_LIMIT, trend_months=TREND_MONTHS,
                      upcoming_days=UPCOMING_DAYS):
    diagnostics = list(data.diagnostics)
    return DashboardSnapshot(
        metrics=_section("metrics", lambda: compute_metrics(data, now), DashboardMetrics, diagnostics),
        workload=_section("workload", lambda: compute_workload(data), Workload, diagnostics),
        revenue_trend=_section(
            "revenueTrend", lambda: revenue_trend(data.orders, now, trend_months), list, diagnostics
        ),
        client_trend=_section(
            "clientTrend", lambda: client_trend(data.clients, now, trend_months), list, diagnostics
        ),
        recent_clients=_section(
            "recentClients", lambda: recent_clients(data.clients, recent_limit), list, diagnostics
        ),
        recent_orders=_section(
            "recentOrders", lambda: recent_orders(data.orders, recent_limit), list, diagnostics
        ),
        upcoming_sessions=_section(
            "upcomingSessions",
            lambda: upcoming_sessions(data.orders, now, recent_limit, upcoming_days),
            list,
            diagnostics,
        ),
        diagnostics=diagnostics,
    )


def compute_trainer_dashboard(source, now, **options):
    """
    Load one consistent input from ``source`` and aggregate it.

    Store failures (TransientStoreError) raised while loading propagate; section
    failures during aggregation never do.
    """
    return compute_dashboard(source.load(now), now, **options)
