"""Aggregates for the admin dashboard."""

from datetime import datetime

from sqlalchemy import func

from app.extensions import db
from auth.models import User
from subscriptions.models import SubscriptionPlan
from subscriptions.utils import ACTIVE_STATUSES, month_start


def paid_users_query():
    return User.query.filter(
        User.subscription_tier != 'free',
        User.subscription_status.in_(ACTIVE_STATUSES)
    )


def monthly_revenue():
    """Sum in cents of plan prices over users on an active paid plan."""
    total = db.session.query(func.coalesce(func.sum(SubscriptionPlan.price), 0))\
        .select_from(User)\
        .join(SubscriptionPlan, SubscriptionPlan.name == User.subscription_tier)\
        .filter(User.subscription_tier != 'free', User.subscription_status.in_(ACTIVE_STATUSES))\
        .scalar()
    return int(total or 0)


def churn_rate(active, cancelled):
    """Cancelled share of paid subscriptions, as a percentage with one decimal."""
    if active + cancelled == 0:
        return 0
    return round(cancelled * 100 / (active + cancelled), 1)


def feature_usage():
    from incidents.models import Incident, AudioRecording
    from education.models import UserProgress
    from greyrock.models import GreyRockAttempt
    from boundaries.models import UserBoundary, BoundaryViolation

    return {
        'incidents': Incident.query.count(),
        'audioRecordings': AudioRecording.query.count(),
        'lessonsCompleted': UserProgress.query.filter_by(completed=True).count(),
        'greyRockAttempts': GreyRockAttempt.query.count(),
        'boundaries': UserBoundary.query.count(),
        'boundaryViolations': BoundaryViolation.query.count(),
    }


def platform_metrics(now=None):
    now = now or datetime.utcnow()
    active = paid_users_query().count()
    cancelled = User.query.filter(
        User.subscription_tier != 'free',
        User.subscription_status == 'cancelled'
    ).count()
    return {
        'totalUsers': User.query.count(),
        'activeSubscriptions': active,
        'monthlyRevenue': monthly_revenue(),
        'newSignups': User.query.filter(User.created_at >= month_start(now)).count(),
        'churnRate': churn_rate(active, cancelled),
        'popularFeatures': feature_usage(),
    }
