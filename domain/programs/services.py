"""
Current-program resolution.

Stores hand over rows already ordered by recency (``created_at DESC``). The
first active row seen for a client is authoritative; later active rows for the
same client and kind are a data anomaly and are ignored, never merged.
"""
import logging
import numbers

from domain.errors import MalformedPayloadError
from domain.programs.schemas import (
    ExerciseRef,
    Meal,
    MealItem,
    NutritionDay,
    NutritionProgramDetail,
    ProgramKind,
    ProgramSummary,
    SupplementEntry,
    SupplementProgramDetail,
    WorkoutDay,
    WorkoutExercise,
    WorkoutProgramDetail,
)

logger = logging.getLogger(__name__)


# ---------- tolerant field readers ----------

def _text(value):
    return value if isinstance(value, str) else None


def _non_empty(value):
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _number(value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    return float(value)


def _id(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        return str(value)
    return None


def _entry_id(value):
    if isinstance(value, str):
        return _non_empty(value)
    return _id(value)


def string_list(value):
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _objects(value):
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _order_or(value, default):
    order = _int(value)
    return default if order is None else order


def _by_order(items):
    # sorted() is stable, so entries without an order keep their stored position.
    return sorted(items, key=lambda item: _int(item.get("order")) or 0)


def extract_template_id(payload):
    """templateId from a program payload, or None for anything malformed."""
    if not isinstance(payload, dict):
        return None
    return _non_empty(payload.get("templateId"))


# ---------- supplement entries ----------

def parse_supplement_entry(raw, index, program_id):
    if not isinstance(raw, dict):
        raise MalformedPayloadError("supplement entry is not an object", index=index)

    template_id = _non_empty(raw.get("templateId"))
    name = _non_empty(raw.get("name"))
    if not template_id:
        raise MalformedPayloadError("supplement entry has no templateId", index=index)
    if not name:
        raise MalformedPayloadError("supplement entry has no name", index=index)

    return SupplementEntry(
        id=_entry_id(raw.get("id")) or f"{program_id}-{index}",
        program_id=program_id,
        template_id=template_id,
        name=name,
        category=_text(raw.get("category")),
        brand=_text(raw.get("brand")),
        dosage=_text(raw.get("dosage")),
        timing=_text(raw.get("timing")),
        default_dosage=_text(raw.get("defaultDosage")),
        default_timing=_text(raw.get("defaultTiming")),
        benefits=string_list(raw.get("benefits")),
        timing_options=string_list(raw.get("timingOptions")),
        notes=_text(raw.get("notes")),
        price=_number(raw.get("price")),
    )


def normalize_supplement_entries(payload, program_id, diagnostics=None):
    """Valid entries of a supplement payload; a malformed entry drops only itself."""
    if not isinstance(payload, list):
        return []

    entries = []
    for index, raw in enumerate(payload):
        try:
            entries.append(parse_supplement_entry(raw, index, program_id))
        except MalformedPayloadError as e:
            logger.warning(
                "supplement_entry_dropped program_id=%s index=%s: %s", program_id, index, e
            )
            if diagnostics is not None:
                diagnostics.append(e)
    return entries


# ---------- summaries ----------

def summarize_program(row, kind):
    kind = ProgramKind(kind)
    template_id, supplements = None, None
    if kind == ProgramKind.SUPPLEMENT:
        supplements = normalize_supplement_entries(row.payload, row.id)
    else:
        template_id = extract_template_id(row.payload)
    return ProgramSummary(
        id=row.id,
        client_id=row.client_id,
        kind=kind,
        title=row.title,
        template_id=template_id,
        created_at=row.created_at,
        is_active=row.is_active,
        supplements=supplements,
    )


def first_per_client(rows):
    """
    Fold a recency-ordered stream into {client_id: row}, keeping the first
    active row per client. Insertion order follows first appearance.
    """
    winners = {}
    for row in rows:
        if not row.is_active or row.client_id in winners:
            continue
        winners[row.client_id] = row
    return winners


def resolve_current_programs(rows, kind, client_ids=None):
    """
    One summary per client from a single batch of recency-ordered rows.
    Every id in ``client_ids`` appears in the result, mapped to None when the
    client has no active program of this kind; rows of other clients are
    ignored. Without ``client_ids`` every client found in ``rows`` is kept.
    """
    result = {} if client_ids is None else {client_id: None for client_id in client_ids}
    for client_id, row in first_per_client(rows).items():
        if client_ids is not None and client_id not in result:
            continue
        result[client_id] = summarize_program(row, kind)
    return result


def resolve_current_program(rows, client_id, kind):
    return resolve_current_programs(
        (row for row in rows if row.client_id == client_id), kind, [client_id]
    )[client_id]


# ---------- detail views ----------

def _exercise_ref(value):
    if not isinstance(value, dict):
        return None
    return ExerciseRef(
        id=_id(value.get("id")),
        name=_text(value.get("name")),
        category=_text(value.get("category")),
        difficulty=_text(value.get("difficulty")),
        video_url=_text(value.get("videoUrl")),
        target_muscles=string_list(value.get("targetMuscles")),
    )


def _workout_day(day):
    return WorkoutDay(
        id=_id(day.get("id")),
        order=_order_or(day.get("order"), 0),
        label=_text(day.get("label")),
        video_url=_text(day.get("videoUrl")),
        notes=_text(day.get("notes")),
        exercises=[
            WorkoutExercise(
                id=_id(exercise.get("id")),
                order=_int(exercise.get("order")),
                sets=_int(exercise.get("sets")),
                reps=_id(exercise.get("reps")),
                rest=_int(exercise.get("rest")),
                weight=_id(exercise.get("weight")),
                notes=_text(exercise.get("notes")),
                exercise=_exercise_ref(exercise.get("exercise")),
            )
            for exercise in _by_order(_objects(day.get("exercises")))
        ],
    )


def workout_detail(row):
    data = row.payload if isinstance(row.payload, dict) else {}
    return WorkoutProgramDetail(
        id=row.id,
        title=row.title,
        description=row.description,
        assigned_at=row.created_at,
        template_id=extract_template_id(data),
        duration=_int(data.get("duration")),
        difficulty=_text(data.get("difficulty")),
        muscle_groups=string_list(data.get("muscleGroups")),
        days=[_workout_day(day) for day in _by_order(_objects(data.get("days")))],
    )


def _meal(meal, index):
    return Meal(
        id=_id(meal.get("id")),
        order=_order_or(meal.get("order"), index + 1),
        title=_non_empty(meal.get("title")) or f"Meal {index + 1}",
        items=[
            MealItem(
                id=_id(item.get("id")),
                order=_order_or(item.get("order"), item_index + 1),
                content=_text(item.get("content")) or "",
            )
            for item_index, item in enumerate(_by_order(_objects(meal.get("items"))))
        ],
    )


def nutrition_detail(row):
    data = row.payload if isinstance(row.payload, dict) else {}
    days = []
    for index, day in enumerate(_by_order(_objects(data.get("days")))):
        days.append(NutritionDay(
            id=_id(day.get("id")),
            order=_order_or(day.get("order"), index + 1),
            title=_non_empty(day.get("title")) or f"Day {index + 1}",
            notes=_text(day.get("notes")),
            meals=[
                _meal(meal, meal_index)
                for meal_index, meal in enumerate(_by_order(_objects(day.get("meals"))))
            ],
        ))
    return NutritionProgramDetail(
        id=row.id,
        title=row.title,
        description=row.description or _text(data.get("description")),
        goal=_text(data.get("goal")),
        assigned_at=row.created_at,
        template_id=extract_template_id(data),
        general_notes=_text(data.get("generalNotes")),
        days=days,
    )


def supplement_detail(row):
    return SupplementProgramDetail(
        id=row.id,
        title=row.title,
        description=row.description,
        assigned_at=row.created_at,
        supplements=normalize_supplement_entries(row.payload, row.id),
    )


DETAIL_BUILDERS = {
    ProgramKind.WORKOUT: workout_detail,
    ProgramKind.NUTRITION: nutrition_detail,
    ProgramKind.SUPPLEMENT: supplement_detail,
}


class ProgramResolver:
    """Current-program lookups over a program store that batches per kind."""

    def __init__(self, store):
        self.store = store

    def resolve_current_program(self, client_id, kind):
        kind = ProgramKind(kind)
        rows = self.store.fetch_active(kind, [client_id])
        return resolve_current_program(rows, client_id, kind)

    def resolve_current_programs(self, client_ids, kind):
        kind = ProgramKind(kind)
        client_ids = list(dict.fromkeys(client_ids))
        if not client_ids:
            return {}
        return resolve_current_programs(self.store.fetch_active(kind, client_ids), kind, client_ids)

    def current_detail(self, client_id, kind):
        kind = ProgramKind(kind)
        row = first_per_client(self.store.fetch_active(kind, [client_id])).get(client_id)
        if row is None:
            return None
        return DETAIL_BUILDERS[kind](row)
