from datetime import timedelta

import pytest

from conftest import NOW, InMemoryLedger, days, purchase_record
from domain.entitlements.schemas import PurchaseStatus
from domain.entitlements.services import (
    EntitlementResolver,
    calculate_expiry,
    entitlement_payment_status,
    remaining_days,
    resolve_active_entitlement,
    select_active_purchase,
)
from domain.errors import DataIntegrityError


def test_no_purchases_means_no_entitlement():
    assert resolve_active_entitlement([], NOW) is None
    assert EntitlementResolver(InMemoryLedger()).resolve(42, NOW) is None


def test_single_valid_purchase_is_returned_among_invalid_ones():
    purchases = [
        purchase_record(1, status="EXPIRED", expires_at=NOW + days(20)),
        purchase_record(2, status="CANCELLED", expires_at=NOW + days(40)),
        purchase_record(3, status="ACTIVE", expires_at=NOW - days(2)),
        purchase_record(4, status="ACTIVE", expires_at=NOW + days(5)),
        purchase_record(5, status="REFUNDED", expires_at=NOW + days(50)),
    ]
    entitlement = resolve_active_entitlement(purchases, NOW)
    assert entitlement.id == 4


@pytest.mark.parametrize("order", [(0, 1), (1, 0)])
def test_furthest_expiry_wins_regardless_of_purchase_order(order):
    short = purchase_record(1, expires_at=NOW + days(10), purchased_at=NOW - days(1))
    long = purchase_record(2, expires_at=NOW + days(30), purchased_at=NOW - days(20))
    pair = [short, long]
    purchases = [pair[i] for i in order]

    assert resolve_active_entitlement(purchases, NOW).id == 2


def test_identical_expiry_breaks_tie_by_latest_purchase():
    expires = NOW + days(15)
    older = purchase_record(1, expires_at=expires, purchased_at=NOW - days(9))
    newer = purchase_record(2, expires_at=expires, purchased_at=NOW - days(3))
    assert select_active_purchase([newer, older], NOW).id == 2
    assert select_active_purchase([older, newer], NOW).id == 2


def test_pending_with_later_expiry_beats_active():
    pending = purchase_record(1, status="PENDING", expires_at=NOW + days(5))
    active = purchase_record(2, status="ACTIVE", expires_at=NOW + days(2))

    entitlement = resolve_active_entitlement([active, pending], NOW)
    assert entitlement.id == 1
    assert entitlement.status == PurchaseStatus.PENDING


def test_expiry_is_time_computed_not_status_driven():
    stale = purchase_record(1, status="ACTIVE", expires_at=NOW - timedelta(seconds=1))
    assert resolve_active_entitlement([stale], NOW) is None


def test_expiry_exactly_now_is_not_valid():
    assert resolve_active_entitlement([purchase_record(1, expires_at=NOW)], NOW) is None


def test_entitlement_carries_package_snapshot_and_remaining_days():
    entitlement = resolve_active_entitlement(
        [purchase_record(7, expires_at=NOW + days(3) + timedelta(hours=1))], NOW
    )
    assert entitlement.remaining_days == 4
    assert entitlement.package.name == "Pro"
    assert entitlement.package.price == 499.9
    assert entitlement.package.features == ["Workout plan", "Diet plan"]

    payload = entitlement.to_json()
    assert payload["remainingDays"] == 4
    assert payload["package"]["durationInDays"] == 30
    assert payload["expiresAt"].startswith("2026-03-18T13:00:00")


def test_missing_package_raises_integrity_error():
    orphan = purchase_record(9, package=None, package_id=404)
    with pytest.raises(DataIntegrityError) as excinfo:
        resolve_active_entitlement([orphan], NOW)
    assert excinfo.value.entity == "package"
    assert excinfo.value.entity_id == 404


def test_resolve_or_none_fails_closed_on_integrity_error(caplog):
    resolver = EntitlementResolver(InMemoryLedger([purchase_record(9, package=None)]))
    with caplog.at_level("WARNING"):
        assert resolver.resolve_or_none(1, NOW) is None
    assert "entitlement_integrity_error" in caplog.text


def test_remaining_days_rounds_up_and_floors_at_zero():
    assert remaining_days(NOW + timedelta(hours=1), NOW) == 1
    assert remaining_days(NOW + days(2), NOW) == 2
    assert remaining_days(NOW + days(2) + timedelta(seconds=1), NOW) == 3
    assert remaining_days(NOW, NOW) == 0
    assert remaining_days(NOW - days(3), NOW) == 0


def test_calculate_expiry_ignores_negative_durations():
    assert calculate_expiry(30, NOW) == NOW + days(30)
    assert calculate_expiry(-5, NOW) == NOW
    assert calculate_expiry(None, NOW) == NOW


def test_resolve_many_uses_one_read_and_resolves_each_user():
    ledger = InMemoryLedger([
        purchase_record(1, user_id=1, expires_at=NOW + days(10)),
        purchase_record(2, user_id=1, expires_at=NOW + days(40)),
        purchase_record(3, user_id=2, status="EXPIRED"),
        purchase_record(4, user_id=3, package=None),
        purchase_record(5, user_id=4, status="PENDING", expires_at=NOW + days(1)),
    ])
    result = EntitlementResolver(ledger).resolve_many([1, 2, 3, 4, 1], NOW)

    assert len(ledger.calls) == 1
    assert list(result) == [1, 2, 3, 4]
    assert result[1].id == 2
    assert result[2] is None
    assert result[3] is None
    assert result[4].id == 5


def test_payment_status_mapping():
    active = resolve_active_entitlement([purchase_record(1)], NOW)
    pending = resolve_active_entitlement([purchase_record(2, status="PENDING")], NOW)
    assert entitlement_payment_status(active) == "paid"
    assert entitlement_payment_status(pending) == "pending"
    assert entitlement_payment_status(None) == "unknown"


def test_naive_timestamps_are_treated_as_utc():
    naive = purchase_record(1, expires_at=(NOW + days(1)).replace(tzinfo=None))
    assert resolve_active_entitlement([naive], NOW).id == 1
