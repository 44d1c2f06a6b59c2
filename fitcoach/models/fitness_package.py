from fitcoach.extensions import db
from fitcoach.models.user import utcnow


class FitnessPackage(db.Model):
    __tablename__ = "fitness_packages"

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(80), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    headline = db.Column(db.String(200))
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    original_price = db.Column(db.Numeric(10, 2))
    currency = db.Column(db.String(3), default="TRY", nullable=False)
    duration_in_days = db.Column(db.Integer, nullable=False, default=30)
    features = db.Column(db.JSON, default=list)
    not_included = db.Column(db.JSON, default=list)
    is_popular = db.Column(db.Boolean, default=False)
    is_active = db.Column(db.Boolean, default=True, index=True)
    sort_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<FitnessPackage {self.slug}>'
