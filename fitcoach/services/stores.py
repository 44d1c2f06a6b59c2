"""
SQLAlchemy-backed adapters feeding the engine.

Every read is a single batched query over an id set; SQLAlchemy failures are
re-raised as TransientStoreError so callers can surface a "try again" state.
"""
import logging
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError

from domain.entitlements.schemas import GRANTING_STATUSES, PurchaseRecord, PurchaseStatus
from domain.entitlements.services import calculate_expiry
from domain.clock import to_naive_utc
from domain.errors import TransientStoreError
from domain.packages.schemas import PackageSnapshot
from domain.programs.schemas import ProgramKind, ProgramRow
from fitcoach.extensions import db
from fitcoach.models import (
    FitnessPackage,
    NutritionProgram,
    PackagePurchase,
    PTForm,
    SupplementProgram,
    WorkoutProgram,
)

logger = logging.getLogger(__name__)


def store_read(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"Store read failed in {fn.__qualname__}: {e}")
            db.session.rollback()
            raise TransientStoreError(f"{fn.__qualname__} failed") from e
    return wrapper


def package_snapshot(package):
    if package is None:
        return None
    return PackageSnapshot.model_validate(package)


class PackageCatalog:
    @store_read
    def get(self, package_id):
        return db.session.get(FitnessPackage, package_id)

    @store_read
    def get_by_slug(self, slug):
        return FitnessPackage.query.filter_by(slug=slug).first()

    @store_read
    def list_active(self):
        return FitnessPackage.query.filter_by(is_active=True).order_by(
            FitnessPackage.sort_order, FitnessPackage.price
        ).all()


class PurchaseLedger:
    @store_read
    def fetch_purchases(self, user_ids):
        """ACTIVE/PENDING purchases of every user in ``user_ids``, with their package."""
        user_ids = list(user_ids)
        if not user_ids:
            return []
        rows = db.session.query(PackagePurchase, FitnessPackage).outerjoin(
            FitnessPackage, FitnessPackage.id == PackagePurchase.package_id
        ).filter(
            PackagePurchase.user_id.in_(user_ids),
            PackagePurchase.status.in_([s.value for s in GRANTING_STATUSES]),
        ).order_by(
            PackagePurchase.expires_at.desc(),
            PackagePurchase.purchased_at.desc(),
        ).all()

        return [
            PurchaseRecord(
                id=purchase.id,
                user_id=purchase.user_id,
                package_id=purchase.package_id,
                status=purchase.status,
                starts_at=purchase.starts_at,
                expires_at=purchase.expires_at,
                purchased_at=purchase.purchased_at,
                amount=purchase.amount,
                package=package_snapshot(package),
            )
            for purchase, package in rows
        ]

    def record_purchase(self, user_id, package, now, payment_reference=None):
        """
        Replace the user's still-valid purchases with a fresh ACTIVE one.
        Runs in one transaction; earlier grants are marked EXPIRED.
        """
        try:
            PackagePurchase.query.filter(
                PackagePurchase.user_id == user_id,
                PackagePurchase.status.in_([s.value for s in GRANTING_STATUSES]),
                PackagePurchase.expires_at > to_naive_utc(now),
            ).update(
                {"status": PurchaseStatus.EXPIRED.value, "cancelled_at": now},
                synchronize_session=False,
            )
            purchase = PackagePurchase(
                user_id=user_id,
                package_id=package.id,
                status=PurchaseStatus.ACTIVE.value,
                purchased_at=now,
                starts_at=now,
                expires_at=calculate_expiry(package.duration_in_days, now),
                amount=package.price,
                currency=package.currency,
                payment_reference=payment_reference,
            )
            db.session.add(purchase)
            db.session.commit()
            return purchase
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Recording purchase failed for user {user_id}: {e}")
            raise TransientStoreError("record_purchase failed") from e


PROGRAM_MODELS = {
    ProgramKind.WORKOUT: (WorkoutProgram, "program_data"),
    ProgramKind.NUTRITION: (NutritionProgram, "program_data"),
    ProgramKind.SUPPLEMENT: (SupplementProgram, "supplements"),
}


class ProgramStore:
    @store_read
    def fetch_active(self, kind, client_ids):
        """Active rows of one kind for every client in ``client_ids``, newest first."""
        client_ids = list(client_ids)
        if not client_ids:
            return []
        model, payload_attr = PROGRAM_MODELS[ProgramKind(kind)]
        rows = model.query.filter(
            model.client_id.in_(client_ids),
            model.is_active.is_(True),
        ).order_by(model.created_at.desc(), model.id.desc()).all()

        return [
            ProgramRow(
                id=row.id,
                client_id=row.client_id,
                title=row.title,
                description=row.description,
                is_active=row.is_active,
                created_at=row.created_at,
                payload=getattr(row, payload_attr),
            )
            for row in rows
        ]

    @store_read
    def count_active(self, kind, trainer_id=None):
        model, _ = PROGRAM_MODELS[ProgramKind(kind)]
        query = db.session.query(db.func.count(model.id)).filter(model.is_active.is_(True))
        if trainer_id is not None:
            query = query.filter(model.trainer_id == trainer_id)
        return query.scalar() or 0


class PtFormStore:
    @store_read
    def fetch_latest(self, client_ids):
        """Most recent PT form per client, from one recency-ordered query."""
        client_ids = list(client_ids)
        if not client_ids:
            return {}
        forms = PTForm.query.filter(PTForm.user_id.in_(client_ids)).order_by(
            PTForm.created_at.desc(), PTForm.id.desc()
        ).all()
        latest = {}
        for form in forms:
            latest.setdefault(form.user_id, form)
        return latest
