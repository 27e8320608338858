from datetime import datetime
from app.extensions import db

UNLIMITED = -1

# Defaults per plan name; a plan row's ``features`` JSON overrides these.
SUBSCRIPTION_FEATURES = {
    'free': {
        'incidentLimit': 10,
        'educationalLessons': 3,
        'greyRockScenarios': 2,
        'boundaryTemplates': 3,
        'aiAnalysis': False,
        'exportReports': False,
        'prioritySupport': False,
    },
    'basic': {
        'incidentLimit': 50,
        'educationalLessons': 10,
        'greyRockScenarios': 5,
        'boundaryTemplates': 10,
        'aiAnalysis': True,
        'exportReports': False,
        'prioritySupport': False,
    },
    'pro': {
        'incidentLimit': UNLIMITED,
        'educationalLessons': UNLIMITED,
        'greyRockScenarios': UNLIMITED,
        'boundaryTemplates': UNLIMITED,
        'aiAnalysis': True,
        'exportReports': True,
        'prioritySupport': False,
    },
    'therapeutic': {
        'incidentLimit': UNLIMITED,
        'educationalLessons': UNLIMITED,
        'greyRockScenarios': UNLIMITED,
        'boundaryTemplates': UNLIMITED,
        'aiAnalysis': True,
        'exportReports': True,
        'prioritySupport': True,
    },
}

class SubscriptionPlan(db.Model):
    """A purchasable tier; ``incident_limit`` of -1 means unlimited."""
    __tablename__ = 'subscription_plans'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    display_name = db.Column(db.String(100), nullable=False)
    price = db.Column(db.Integer, nullable=False, default=0)  # cents
    currency = db.Column(db.String(3), nullable=False, default='usd')
    interval = db.Column(db.String(10), nullable=False, default='month')
    features = db.Column(db.JSON, nullable=False, default=dict)
    incident_limit = db.Column(db.Integer, nullable=False, default=UNLIMITED)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    subscriptions = db.relationship('UserSubscription', backref='plan', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'displayName': self.display_name,
            'price': self.price,
            'currency': self.currency,
            'interval': self.interval,
            'features': {**SUBSCRIPTION_FEATURES.get(self.name, {}), **(self.features or {})},
            'incidentLimit': self.incident_limit,
            'isActive': self.is_active
        }

    def __repr__(self):
        return f'<SubscriptionPlan {self.name}>'

class UserSubscription(db.Model):
    __tablename__ = 'user_subscriptions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)
    plan_id = db.Column(db.Integer, db.ForeignKey('subscription_plans.id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')
    current_period_start = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    current_period_end = db.Column(db.DateTime, nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship('User', backref=db.backref('subscription', uselist=False, cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'planId': self.plan_id,
            'status': self.status,
            'currentPeriodStart': self.current_period_start.isoformat(),
            'currentPeriodEnd': self.current_period_end.isoformat() if self.current_period_end else None,
            'cancelledAt': self.cancelled_at.isoformat() if self.cancelled_at else None,
            'plan': self.plan.to_dict() if self.plan else None
        }
