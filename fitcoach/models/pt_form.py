from fitcoach.extensions import db
from fitcoach.models.user import utcnow


class PTForm(db.Model):
    """Personal-training intake form submitted by an entitled client."""

    __tablename__ = "pt_forms"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    workout_location = db.Column(db.String(20))  # home, gym
    equipment_available = db.Column(db.String(30))
    workout_days_per_week = db.Column(db.Integer, nullable=False)
    experience = db.Column(db.String(20), default="beginner")
    meal_frequency = db.Column(db.Integer)
    health_conditions = db.Column(db.Text)
    injuries = db.Column(db.Text)
    medications = db.Column(db.Text)
    diet_restrictions = db.Column(db.Text)
    training_expectations = db.Column(db.Text)
    special_requests = db.Column(db.Text)
    agreed_to_terms = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    user = db.relationship("User", back_populates="pt_forms")
