from datetime import datetime, timezone
from werkzeug.security import generate_password_hash, check_password_hash
from fitcoach.extensions import db

USERS_TABLE = "users"


def utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    __tablename__ = USERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.String(20),
        db.CheckConstraint("role IN ('client','trainer','admin')"),
        nullable=False,
        default="client",
        index=True,
    )
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    profile = db.relationship("ClientProfile", uselist=False, back_populates="user", cascade="all, delete-orphan")
    purchases = db.relationship("PackagePurchase", back_populates="user", lazy="dynamic", cascade="all, delete-orphan")
    pt_forms = db.relationship("PTForm", back_populates="user", lazy="dynamic", cascade="all, delete-orphan")

    # Trainer <-> Client roster
    client_links = db.relationship("TrainerClient", foreign_keys="[TrainerClient.trainer_id]", back_populates="trainer", lazy="dynamic", cascade="all, delete-orphan")
    trainer_links = db.relationship("TrainerClient", foreign_keys="[TrainerClient.client_id]", back_populates="client", lazy="dynamic", cascade="all, delete-orphan")

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    __table_args__ = (
        db.Index("idx_users_role_active", "role", "is_active"),
    )

    @property
    def is_admin(self):
        return self.role == "admin"

    @property
    def is_trainer(self):
        return self.role == "trainer"

    @property
    def is_client(self):
        return self.role == "client"

    @property
    def display_name(self):
        if self.profile:
            full_name = f"{self.profile.first_name or ''} {self.profile.last_name or ''}".strip()
            if full_name:
                return full_name
        return self.name or self.email
