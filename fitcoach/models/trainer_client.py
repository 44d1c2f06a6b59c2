from fitcoach.extensions import db
from fitcoach.models.user import utcnow


class TrainerClient(db.Model):
    __tablename__ = "trainer_clients"

    id = db.Column(db.Integer, primary_key=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True)
    # Join date used by the client trend
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    trainer = db.relationship("User", foreign_keys=[trainer_id], back_populates="client_links")
    client = db.relationship("User", foreign_keys=[client_id], back_populates="trainer_links")

    __table_args__ = (
        db.UniqueConstraint("trainer_id", "client_id", name="uq_trainer_client_unique"),
    )
