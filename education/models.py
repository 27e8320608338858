from datetime import datetime
from app.extensions import db

class EducationalLesson(db.Model):
    """Short reading lesson about a manipulation tactic or recovery topic."""
    __tablename__ = 'educational_lessons'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False, index=True)
    difficulty = db.Column(db.String(20), nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # minutes
    tags = db.Column(db.JSON, nullable=False, default=list)
    key_takeaways = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'category': self.category,
            'difficulty': self.difficulty,
            'duration': self.duration,
            'tags': self.tags or [],
            'keyTakeaways': self.key_takeaways or []
        }

    def __repr__(self):
        return f'<EducationalLesson {self.title}>'

class UserProgress(db.Model):
    """Completion record; one row per user and lesson."""
    __tablename__ = 'user_progress'
    __table_args__ = (db.UniqueConstraint('user_id', 'lesson_id', name='uq_progress_user_lesson'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    lesson_id = db.Column(db.Integer, db.ForeignKey('educational_lessons.id'), nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    time_spent = db.Column(db.Integer, nullable=False, default=0)  # seconds

    lesson = db.relationship('EducationalLesson')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'lessonId': self.lesson_id,
            'completed': self.completed,
            'completedAt': self.completed_at.isoformat() if self.completed_at else None,
            'timeSpent': self.time_spent
        }
