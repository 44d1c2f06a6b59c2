from fitcoach.extensions import db
from fitcoach.models.user import utcnow


class TrainerOrder(db.Model):
    __tablename__ = "trainer_orders"

    id = db.Column(db.Integer, primary_key=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    client_name = db.Column(db.String(150), nullable=False)
    package_name = db.Column(db.String(100), nullable=False)
    package_type = db.Column(db.String(50))
    amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('active','completed','pending','cancelled')"),
        default="pending",
        index=True,
    )
    payment_status = db.Column(
        db.String(20),
        db.CheckConstraint("payment_status IN ('paid','pending','refunded')"),
        default="pending",
        index=True,
    )
    order_date = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    start_date = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.Index('idx_trainer_orders_trainer_date', 'trainer_id', 'order_date'),
    )

    def __repr__(self):
        return f'<TrainerOrder {self.id}: {self.amount} - {self.payment_status}>'
