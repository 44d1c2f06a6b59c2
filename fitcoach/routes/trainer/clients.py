import math
from datetime import timedelta

from flask import current_app, jsonify, request
from sqlalchemy import or_

from domain.clock import to_naive_utc
from domain.entitlements.services import entitlement_payment_status
from domain.programs.schemas import ProgramKind
from fitcoach.models import ClientProfile, TrainerClient, User
from fitcoach.services.access import entitlement_resolver, program_resolver, request_now
from fitcoach.services.stores import PtFormStore, store_read
from fitcoach.utils.decorators import role_required

from . import trainer_bp


def _int_arg(name, default):
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default


def _program_json(summary):
    if summary is None:
        return None
    return {
        "id": summary.id,
        "title": summary.title,
        "templateId": summary.template_id,
        "createdAt": summary.to_json()["createdAt"],
        "isActive": summary.is_active,
    }


def _pt_form_json(form):
    if form is None:
        return None
    return {
        "id": form.id,
        "updatedAt": form.updated_at.isoformat() if form.updated_at else None,
        "workoutLocation": form.workout_location,
        "workoutDaysPerWeek": form.workout_days_per_week,
        "experience": form.experience,
    }


def _active_package_json(entitlement):
    if entitlement is None:
        return None
    data = entitlement.to_json()
    return {
        "id": data["id"],
        "name": data["package"]["name"],
        "price": data["package"]["price"],
        "currency": data["package"]["currency"],
        "startsAt": data["startsAt"],
        "expiresAt": data["expiresAt"],
        "remainingDays": data["remainingDays"],
        "status": data["status"],
    }


@store_read
def _roster_page(trainer_id, status, search, page, page_size, now):
    roster = User.query.join(
        TrainerClient, TrainerClient.client_id == User.id
    ).outerjoin(
        ClientProfile, ClientProfile.user_id == User.id
    ).filter(TrainerClient.trainer_id == trainer_id)

    totals = {
        "total": roster.count(),
        "active": roster.filter(User.is_active.is_(True)).count(),
        "inactive": roster.filter(User.is_active.is_(False)).count(),
        "recent": roster.filter(User.created_at >= to_naive_utc(now - timedelta(days=30))).count(),
    }

    matched = roster
    if status == "active":
        matched = matched.filter(User.is_active.is_(True))
    elif status == "inactive":
        matched = matched.filter(User.is_active.is_(False))
    if search:
        pattern = f"%{search}%"
        matched = matched.filter(or_(
            User.email.ilike(pattern),
            User.name.ilike(pattern),
            ClientProfile.first_name.ilike(pattern),
            ClientProfile.last_name.ilike(pattern),
            ClientProfile.phone.ilike(pattern),
        ))

    matched_count = matched.count()
    page_count = math.ceil(matched_count / page_size) if matched_count else 0
    current_page = min(page, page_count) if page_count else 0
    offset = (current_page - 1) * page_size if page_count else 0

    users = matched.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(page_size).all()
    return users, totals, matched_count, page_count, current_page


@trainer_bp.route("/clients", methods=["GET"])
@role_required("trainer")
def list_clients(current_user):
    config = current_app.config
    now = request_now()
    page = max(_int_arg("page", 1), 1)
    page_size = min(max(_int_arg("pageSize", config["CLIENTS_PAGE_SIZE"]), 1), config["CLIENTS_MAX_PAGE_SIZE"])
    search = (request.args.get("search") or "").strip()

    users, totals, matched_count, page_count, current_page = _roster_page(
        current_user.id, request.args.get("status"), search, page, page_size, now
    )

    # One batched read per concern for the whole page
    client_ids = [user.id for user in users]
    programs = program_resolver()
    workouts = programs.resolve_current_programs(client_ids, ProgramKind.WORKOUT)
    diets = programs.resolve_current_programs(client_ids, ProgramKind.NUTRITION)
    supplements = programs.resolve_current_programs(client_ids, ProgramKind.SUPPLEMENT)
    pt_forms = PtFormStore().fetch_latest(client_ids)
    entitlements = entitlement_resolver().resolve_many(client_ids, now)

    clients = []
    for user in users:
        profile = user.profile
        entitlement = entitlements.get(user.id)
        supplement_program = supplements.get(user.id)
        clients.append({
            "id": user.id,
            "name": user.display_name,
            "email": user.email,
            "phone": profile.phone if profile else None,
            "age": profile.age if profile else None,
            "gender": profile.gender if profile else None,
            "program": profile.fitness_goal if profile else None,
            "activityLevel": profile.activity_level if profile else None,
            "currentWeight": profile.weight if profile else None,
            "targetWeight": profile.target_weight if profile else None,
            "avatar": profile.avatar if profile else None,
            "status": "active" if user.is_active else "inactive",
            "joinDate": user.created_at.isoformat() if user.created_at else None,
            "lastActivity": user.updated_at.isoformat() if user.updated_at else None,
            "activeProgram": _program_json(workouts.get(user.id)),
            "activeDiet": _program_json(diets.get(user.id)),
            "supplements": [
                entry.to_json() for entry in (supplement_program.supplements or [])
            ] if supplement_program else [],
            "ptForm": _pt_form_json(pt_forms.get(user.id)),
            "activePackage": _active_package_json(entitlement),
            "paymentStatus": entitlement_payment_status(entitlement),
        })

    return jsonify({
        "clients": clients,
        "pagination": {
            "page": current_page,
            "pageSize": page_size,
            "total": matched_count,
            "pageCount": page_count,
        },
        "stats": totals,
    }), 200
