from datetime import datetime
from app.extensions import db

class GreyRockScenario(db.Model):
    """A provocative message to practice neutral, low-engagement replies to."""
    __tablename__ = 'grey_rock_scenarios'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    provocative_message = db.Column(db.Text, nullable=False)
    difficulty = db.Column(db.String(20), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    good_responses = db.Column(db.JSON, nullable=False, default=list)
    bad_responses = db.Column(db.JSON, nullable=False, default=list)
    tips = db.Column(db.JSON, nullable=False, default=list)

    attempts = db.relationship('GreyRockAttempt', backref='scenario', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'provocativeMessage': self.provocative_message,
            'difficulty': self.difficulty,
            'category': self.category,
            'goodResponses': self.good_responses or [],
            'badResponses': self.bad_responses or [],
            'tips': self.tips or []
        }

    def __repr__(self):
        return f'<GreyRockScenario {self.title}>'

class GreyRockAttempt(db.Model):
    """A user's written reply to a scenario and the model's score for it."""
    __tablename__ = 'grey_rock_attempts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    scenario_id = db.Column(db.Integer, db.ForeignKey('grey_rock_scenarios.id'), nullable=False)
    user_response = db.Column(db.Text, nullable=False)
    ai_score = db.Column(db.Integer, nullable=True)  # 0-100
    ai_feedback = db.Column(db.Text, nullable=True)
    completed_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'scenarioId': self.scenario_id,
            'userResponse': self.user_response,
            'aiScore': self.ai_score,
            'aiFeedback': self.ai_feedback,
            'completedAt': self.completed_at.isoformat() if self.completed_at else None
        }
