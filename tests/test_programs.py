from datetime import timedelta

from conftest import NOW
from domain.errors import MalformedPayloadError
from domain.programs.schemas import ProgramKind, ProgramRow
from domain.programs.services import (
    ProgramResolver,
    extract_template_id,
    first_per_client,
    normalize_supplement_entries,
    nutrition_detail,
    resolve_current_program,
    resolve_current_programs,
    workout_detail,
)


def row(id, client_id, minutes_ago, payload=None, is_active=True, title=None):
    return ProgramRow(
        id=id,
        client_id=client_id,
        title=title or f"Program {id}",
        is_active=is_active,
        created_at=NOW - timedelta(minutes=minutes_ago),
        payload=payload,
    )


def by_recency(rows):
    return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)


class FakeProgramStore:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def fetch_active(self, kind, client_ids):
        self.calls.append((kind, list(client_ids)))
        return by_recency([r for r in self.rows if r.client_id in client_ids and r.is_active])


def test_latest_of_three_active_rows_wins():
    rows = by_recency([
        row(1, 10, 300, {"templateId": "old"}),
        row(2, 10, 10, {"templateId": "newest"}),
        row(3, 10, 100, {"templateId": "middle"}),
    ])
    summary = resolve_current_program(rows, 10, ProgramKind.WORKOUT)
    assert summary.id == 2
    assert summary.template_id == "newest"
    assert summary.kind == ProgramKind.WORKOUT


def test_no_rows_resolves_to_none():
    assert resolve_current_program([], 10, "workout") is None


def test_first_per_client_ignores_later_duplicates_and_inactive_rows():
    rows = [row(5, 1, 1, is_active=False), row(4, 1, 2), row(3, 2, 3), row(2, 1, 4), row(1, 2, 5)]
    winners = first_per_client(rows)
    assert {cid: r.id for cid, r in winners.items()} == {1: 4, 2: 3}
    assert list(winners) == [1, 2]


def test_batch_resolution_over_fifty_clients():
    rows = []
    next_id = 1
    for client_id in range(1, 51):
        # every third client has no program; others have 1..3 active rows
        count = 0 if client_id % 3 == 0 else client_id % 4 + 1
        for n in range(count):
            rows.append(row(next_id, client_id, minutes_ago=n * 10 + client_id,
                            payload={"templateId": f"t-{client_id}-{n}"}))
            next_id += 1

    result = resolve_current_programs(by_recency(rows), ProgramKind.NUTRITION, range(1, 51))

    assert len(result) == 50
    for client_id, summary in result.items():
        if client_id % 3 == 0:
            assert summary is None
        else:
            assert summary.client_id == client_id
            assert summary.template_id == f"t-{client_id}-0"


def test_resolver_batches_one_read_per_kind():
    store = FakeProgramStore([row(1, 1, 5), row(2, 2, 5), row(3, 1, 1)])
    result = ProgramResolver(store).resolve_current_programs([1, 2, 3], ProgramKind.WORKOUT)
    assert len(store.calls) == 1
    assert result[1].id == 3
    assert result[2].id == 2
    assert result[3] is None


def test_resolver_skips_read_for_empty_client_list():
    store = FakeProgramStore([])
    assert ProgramResolver(store).resolve_current_programs([], "workout") == {}
    assert store.calls == []


def test_extract_template_id_tolerates_malformed_payloads():
    assert extract_template_id({"templateId": " tpl-1 "}) == "tpl-1"
    assert extract_template_id({"templateId": ""}) is None
    assert extract_template_id({"templateId": 12}) is None
    assert extract_template_id({"templateId": None}) is None
    assert extract_template_id({}) is None
    assert extract_template_id(None) is None
    assert extract_template_id(["templateId"]) is None
    assert extract_template_id("tpl") is None


def test_supplement_entry_missing_name_is_dropped_alone():
    payload = [
        {"templateId": "creatine", "dosage": "5g"},
        {"templateId": "omega-3", "name": " Omega 3 ", "benefits": ["heart", "", 3], "price": 120},
    ]
    diagnostics = []
    entries = normalize_supplement_entries(payload, program_id=8, diagnostics=diagnostics)

    assert len(entries) == 1
    entry = entries[0]
    assert entry.name == "Omega 3"
    assert entry.template_id == "omega-3"
    assert entry.id == "8-1"
    assert entry.benefits == ["heart"]
    assert entry.price == 120.0
    assert len(diagnostics) == 1
    assert isinstance(diagnostics[0], MalformedPayloadError)
    assert diagnostics[0].index == 0


def test_supplement_payload_tolerates_garbage():
    assert normalize_supplement_entries(None, 1) == []
    assert normalize_supplement_entries({"templateId": "x"}, 1) == []
    entries = normalize_supplement_entries(
        ["text", None, {"templateId": "a", "name": "A", "id": "keep", "price": "12"}], 1
    )
    assert [e.id for e in entries] == ["keep"]
    assert entries[0].price is None


def test_supplement_summary_lists_valid_entries():
    rows = [row(1, 5, 1, payload=[{"templateId": "zinc", "name": "Zinc"}, {"name": "No template"}])]
    summary = resolve_current_program(rows, 5, ProgramKind.SUPPLEMENT)
    assert summary.template_id is None
    assert [s.name for s in summary.supplements] == ["Zinc"]


def test_workout_detail_sorts_days_and_exercises():
    payload = {
        "templateId": "tpl-9",
        "duration": 8,
        "muscleGroups": ["legs", 4],
        "days": [
            {"order": 2, "label": "Pull", "exercises": "not-a-list"},
            {"order": 1, "label": "Push", "exercises": [
                {"order": 2, "sets": 3, "reps": "10", "exercise": {"name": "Dips"}},
                {"order": 1, "sets": "x", "reps": 8, "exercise": "bad"},
            ]},
            "garbage",
        ],
    }
    detail = workout_detail(row(1, 1, 1, payload=payload))
    assert detail.template_id == "tpl-9"
    assert detail.muscle_groups == ["legs"]
    assert [d.label for d in detail.days] == ["Push", "Pull"]
    push = detail.days[0]
    assert [e.order for e in push.exercises] == [1, 2]
    assert push.exercises[0].sets is None
    assert push.exercises[0].reps == "8"
    assert push.exercises[0].exercise is None
    assert push.exercises[1].exercise.name == "Dips"
    assert detail.days[1].exercises == []


def test_workout_detail_with_missing_payload():
    detail = workout_detail(row(1, 1, 1, payload=None))
    assert detail.days == []
    assert detail.template_id is None


def test_nutrition_detail_fills_positional_defaults():
    payload = {
        "goal": "cut",
        "days": [
            {"meals": [
                {"items": [{"content": "Eggs"}, {"order": 0, "content": "Oats"}]},
                {"title": "Dinner", "order": 5},
            ]},
        ],
    }
    detail = nutrition_detail(row(3, 1, 1, payload=payload))
    day = detail.days[0]
    assert day.order == 1
    assert day.title == "Day 1"
    assert [m.title for m in day.meals] == ["Meal 1", "Dinner"]
    items = day.meals[0].items
    assert [i.content for i in items] == ["Eggs", "Oats"]
    assert items[1].order == 0
    assert detail.to_json()["days"][0]["meals"][1]["order"] == 5


def test_batch_ignores_rows_of_clients_not_requested():
    rows = by_recency([row(1, 1, 5), row(2, 99, 1)])
    result = resolve_current_programs(rows, ProgramKind.WORKOUT, [1])
    assert list(result) == [1]
    assert result[1].id == 1


def test_batch_without_client_ids_keeps_every_client():
    rows = by_recency([row(1, 1, 5), row(2, 99, 1)])
    assert sorted(resolve_current_programs(rows, ProgramKind.WORKOUT)) == [1, 99]


def test_supplement_entry_keeps_numeric_id():
    entries = normalize_supplement_entries(
        [{"id": 42, "templateId": "zinc", "name": "Zinc"}, {"id": "  ", "templateId": "iron", "name": "Iron"}],
        program_id=3,
    )
    assert [e.id for e in entries] == ["42", "3-1"]
