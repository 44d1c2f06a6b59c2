from fitcoach.extensions import db
from fitcoach.models.user import utcnow


class SupportQuestion(db.Model):
    __tablename__ = 'support_questions'

    id = db.Column(db.Integer, primary_key=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    subject = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    priority = db.Column(db.String(20), default='normal', index=True)
    status = db.Column(db.String(20), default='new', index=True)
    answer = db.Column(db.Text, nullable=True)
    answered_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.Index('idx_support_questions_status_priority', 'status', 'priority'),
        db.CheckConstraint("priority IN ('low', 'normal', 'high')", name='chk_question_priority'),
        db.CheckConstraint("status IN ('new', 'waiting', 'answered', 'closed')", name='chk_question_status'),
    )

    def __repr__(self):
        return f'<SupportQuestion {self.id}: {self.subject[:50]}...>'
