from datetime import datetime, timedelta
from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from app.extensions import db

class User(db.Model):
    """Account owning incidents, progress, attempts and boundaries.

    ``subscription_tier`` holds the name of the user's plan; the matching
    ``SubscriptionPlan`` row supplies its limits and features.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True)
    is_admin = db.Column(db.Boolean, default=False)

    # Subscription
    subscription_tier = db.Column(db.String(50), default='free', nullable=False)
    subscription_status = db.Column(db.String(20), default='active', nullable=False)

    # Relationships
    incidents = db.relationship('Incident', backref='owner', lazy=True, cascade='all, delete-orphan')
    progress = db.relationship('UserProgress', backref='user', lazy=True, cascade='all, delete-orphan')
    greyrock_attempts = db.relationship('GreyRockAttempt', backref='user', lazy=True, cascade='all, delete-orphan')
    boundaries = db.relationship('UserBoundary', backref='user', lazy=True, cascade='all, delete-orphan')

    def __init__(self, **kwargs):
        password = kwargs.pop('password', None)
        super(User, self).__init__(**kwargs)
        if password is not None:
            self.set_password(password)

    def set_password(self, password):
        """Create hashed password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check hashed password."""
        return check_password_hash(self.password_hash, password)

    def generate_auth_token(self, expires_in=None):
        """Generate JWT token for the user."""
        expires = timedelta(seconds=expires_in) if expires_in else None
        return create_access_token(identity=str(self.id), expires_delta=expires)

    def to_dict(self):
        """Return user data as dictionary."""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'isAdmin': self.is_admin,
            'isActive': self.is_active,
            'subscriptionTier': self.subscription_tier,
            'subscriptionStatus': self.subscription_status,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<User {self.username}>'
