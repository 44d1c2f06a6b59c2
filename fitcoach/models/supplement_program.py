from fitcoach.extensions import db
from fitcoach.models.user import utcnow


class SupplementProgram(db.Model):
    __tablename__ = "supplement_programs"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    title = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    # List of entries, each with templateId, name, dosage, timing, ...
    supplements = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.Index("idx_supplement_programs_client_active", "client_id", "is_active", "created_at"),
    )
