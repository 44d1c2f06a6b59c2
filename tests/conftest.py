"""
Pytest configuration and fixtures

Each test gets a fresh in-memory database and a frozen clock, so every
entitlement and dashboard computation sees the same "now".
"""
from datetime import datetime, timedelta, timezone

import pytest
from flask_jwt_extended import create_access_token

from domain.clock import FixedClock
from domain.entitlements.schemas import PurchaseRecord
from domain.packages.schemas import PackageSnapshot
from fitcoach import create_app
from fitcoach.extensions import db as _db
from fitcoach.models import (
    ClientProfile,
    FitnessPackage,
    PackagePurchase,
    TrainerClient,
    User,
)

NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def days(n):
    return timedelta(days=n)


def snapshot(**overrides):
    data = dict(
        id=1, slug="pro", name="Pro", price=499.9, currency="TRY",
        duration_in_days=30, features=["Workout plan", "Diet plan"],
    )
    data.update(overrides)
    return PackageSnapshot(**data)


def purchase_record(id, status="ACTIVE", expires_at=None, purchased_at=None, user_id=1,
                    package=True, **overrides):
    purchased_at = purchased_at or NOW - days(1)
    return PurchaseRecord(
        id=id,
        user_id=user_id,
        package_id=overrides.pop("package_id", 1),
        status=status,
        starts_at=overrides.pop("starts_at", purchased_at),
        expires_at=expires_at or NOW + days(30),
        purchased_at=purchased_at,
        amount=overrides.pop("amount", 499.9),
        package=snapshot() if package is True else package,
    )


class InMemoryLedger:
    def __init__(self, purchases=()):
        self.purchases = list(purchases)
        self.calls = []

    def fetch_purchases(self, user_ids):
        user_ids = list(user_ids)
        self.calls.append(user_ids)
        return [p for p in self.purchases if p.user_id in user_ids]


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def app(clock):
    app = create_app("testing")
    app.config["CLOCK"] = clock
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role="client", name=None, is_active=True, created_at=None, **profile):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=f"{role}{n}@example.com",
            name=name or f"{role.title()} {n}",
            role=role,
            is_active=is_active,
            created_at=created_at or NOW - days(60),
            updated_at=created_at or NOW - days(1),
        )
        user.set_password("secret123")
        db.session.add(user)
        db.session.flush()
        if profile:
            db.session.add(ClientProfile(user_id=user.id, **profile))
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_package(db):
    def _make_package(slug="pro", name="Pro", price=499.90, duration_in_days=30, **extra):
        package = FitnessPackage(
            slug=slug, name=name, price=price, currency="TRY",
            duration_in_days=duration_in_days,
            features=extra.pop("features", ["Workout plan", "Diet plan"]),
            not_included=extra.pop("not_included", []),
            **extra,
        )
        db.session.add(package)
        db.session.commit()
        return package

    return _make_package


@pytest.fixture
def make_purchase(db):
    def _make_purchase(user, package, status="ACTIVE", expires_at=None, purchased_at=None,
                       package_id=None):
        purchased_at = purchased_at or NOW - days(1)
        purchase = PackagePurchase(
            user_id=user.id,
            package_id=package_id if package_id is not None else package.id,
            status=status,
            purchased_at=purchased_at,
            starts_at=purchased_at,
            expires_at=expires_at or NOW + days(30),
            amount=package.price if package is not None else 0,
        )
        db.session.add(purchase)
        db.session.commit()
        return purchase

    return _make_purchase


@pytest.fixture
def link_client(db):
    def _link(trainer, client, created_at=None, is_active=True):
        link = TrainerClient(
            trainer_id=trainer.id, client_id=client.id,
            created_at=created_at or NOW - days(10), is_active=is_active,
        )
        db.session.add(link)
        db.session.commit()
        return link

    return _link


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}

    return _headers
