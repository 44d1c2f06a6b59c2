from fitcoach.extensions import db


class ClientProfile(db.Model):
    __tablename__ = "client_profiles"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    first_name = db.Column(db.String(80))
    last_name = db.Column(db.String(80))
    phone = db.Column(db.String(30))
    age = db.Column(db.Integer)
    gender = db.Column(db.String(10))
    fitness_goal = db.Column(db.String(50))
    activity_level = db.Column(db.String(20))
    weight = db.Column(db.Float)
    target_weight = db.Column(db.Float)
    avatar = db.Column(db.String(255))

    user = db.relationship("User", back_populates="profile")
