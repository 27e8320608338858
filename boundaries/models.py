from datetime import datetime
from app.extensions import db

BOUNDARY_CATEGORIES = ('emotional', 'physical', 'personal', 'digital', 'financial', 'other')

class BoundaryTemplate(db.Model):
    """Starting text a user can adapt into their own boundary."""
    __tablename__ = 'boundary_templates'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    template = db.Column(db.Text, nullable=False)
    example = db.Column(db.Text, nullable=True)
    difficulty = db.Column(db.String(20), nullable=False)
    tags = db.Column(db.JSON, nullable=False, default=list)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'category': self.category,
            'template': self.template,
            'example': self.example,
            'difficulty': self.difficulty,
            'tags': self.tags or []
        }

class UserBoundary(db.Model):
    __tablename__ = 'user_boundaries'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    template_id = db.Column(db.Integer, db.ForeignKey('boundary_templates.id'), nullable=True)
    custom_boundary = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    notes = db.Column(db.Text, nullable=True)
    violation_count = db.Column(db.Integer, nullable=False, default=0)
    last_violated = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    template = db.relationship('BoundaryTemplate')
    violations = db.relationship('BoundaryViolation', backref='boundary', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'templateId': self.template_id,
            'customBoundary': self.custom_boundary,
            'category': self.category,
            'isActive': self.is_active,
            'notes': self.notes,
            'violationCount': self.violation_count,
            'lastViolated': self.last_violated.isoformat() if self.last_violated else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }

class BoundaryViolation(db.Model):
    __tablename__ = 'boundary_violations'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    boundary_id = db.Column(db.Integer, db.ForeignKey('user_boundaries.id'), nullable=False)
    description = db.Column(db.Text, nullable=False)
    severity = db.Column(db.Integer, nullable=False)  # 1-5
    emotional_impact = db.Column(db.Text, nullable=True)
    action_taken = db.Column(db.Text, nullable=True)
    violated_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'boundaryId': self.boundary_id,
            'description': self.description,
            'severity': self.severity,
            'emotionalImpact': self.emotional_impact,
            'actionTaken': self.action_taken,
            'violatedAt': self.violated_at.isoformat() if self.violated_at else None
        }
