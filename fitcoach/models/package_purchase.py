from fitcoach.extensions import db
from fitcoach.models.user import utcnow


class PackagePurchase(db.Model):
    __tablename__ = "package_purchases"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # No FK constraint: a purchase may outlive its package row, which the resolver reports as an integrity error.
    package_id = db.Column(db.Integer, nullable=False, index=True)

    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('PENDING','ACTIVE','EXPIRED','CANCELLED','REFUNDED')"),
        default="PENDING",
        nullable=False,
        index=True,
    )
    purchased_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    starts_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    cancelled_at = db.Column(db.DateTime)

    # Snapshot of the package price at purchase time
    amount = db.Column(db.Numeric(10, 2))
    currency = db.Column(db.String(3))
    payment_reference = db.Column(db.String(255))

    user = db.relationship("User", back_populates="purchases")
    package = db.relationship(
        "FitnessPackage",
        primaryjoin="foreign(PackagePurchase.package_id) == FitnessPackage.id",
        viewonly=True,
    )

    __table_args__ = (
        db.Index("idx_package_purchases_user_status", "user_id", "status"),
        db.Index("idx_package_purchases_expires_at", "expires_at"),
    )

    def __repr__(self):
        return f'<PackagePurchase {self.id}: user={self.user_id} {self.status}>'
