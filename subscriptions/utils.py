"""Plan resolution, feature gating and the monthly incident limit."""

from datetime import datetime, timedelta

from app.extensions import db
from .models import SUBSCRIPTION_FEATURES, UNLIMITED, SubscriptionPlan, UserSubscription

ACTIVE_STATUSES = ('active', 'trialing')
BILLING_PERIOD = timedelta(days=30)


def month_start(now=None):
    now = now or datetime.utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def effective_tier(user, now=None):
    """Name of the plan whose limits currently apply to *user*.

    A cancelled subscription keeps its tier until the paid period ends;
    anything else that is not active falls back to ``free``.
    """
    now = now or datetime.utcnow()
    if user.subscription_status in ACTIVE_STATUSES:
        return user.subscription_tier
    subscription = user.subscription
    if (user.subscription_status == 'cancelled' and subscription
            and subscription.current_period_end and subscription.current_period_end > now):
        return user.subscription_tier
    return 'free'


def assign_plan(user, plan, now=None):
    """Move *user* onto *plan* and open a fresh billing period.

    Keeps the user's tier columns and their subscription row in step; the
    row is created on first use. Caller commits.
    """
    now = now or datetime.utcnow()
    subscription = user.subscription
    if subscription is None:
        subscription = UserSubscription(user=user)
        db.session.add(subscription)
    subscription.plan = plan
    subscription.status = 'active'
    subscription.current_period_start = now
    subscription.current_period_end = now + BILLING_PERIOD
    subscription.cancelled_at = None

    user.subscription_tier = plan.name
    user.subscription_status = 'active'
    return subscription


def plan_features(user, now=None):
    """Feature table for the user's effective plan."""
    tier = effective_tier(user, now)
    features = dict(SUBSCRIPTION_FEATURES.get(tier, SUBSCRIPTION_FEATURES['free']))
    plan = SubscriptionPlan.query.filter_by(name=tier).first()
    if plan:
        features.update(plan.features or {})
        features['incidentLimit'] = plan.incident_limit
    return features


def incidents_this_month(user_id, now=None):
    from incidents.models import Incident

    return Incident.query.filter(
        Incident.user_id == user_id,
        Incident.created_at >= month_start(now)
    ).count()


def subscription_usage(user, now=None):
    from education.models import UserProgress
    from greyrock.models import GreyRockAttempt

    return {
        'incidentsThisMonth': incidents_this_month(user.id, now),
        'incidentLimit': plan_features(user, now)['incidentLimit'],
        'lessonsCompleted': UserProgress.query.filter_by(user_id=user.id, completed=True).count(),
        'greyRockAttempts': GreyRockAttempt.query.filter_by(user_id=user.id).count(),
    }


def check_incident_limit(user, now=None):
    """Return ``(allowed, usage)`` for creating one more incident this month."""
    limit = plan_features(user, now)['incidentLimit']
    used = incidents_this_month(user.id, now)
    allowed = limit == UNLIMITED or used < limit
    return allowed, {'incidentsThisMonth': used, 'incidentLimit': limit}


def ensure_default_plans():
    """Create any missing default plans; returns the number created."""
    prices = {'free': 0, 'basic': 499, 'pro': 999, 'therapeutic': 1999}
    created = 0
    for name, features in SUBSCRIPTION_FEATURES.items():
        if SubscriptionPlan.query.filter_by(name=name).first():
            continue
        db.session.add(SubscriptionPlan(
            name=name,
            display_name=name.capitalize(),
            price=prices[name],
            features={k: v for k, v in features.items() if k != 'incidentLimit'},
            incident_limit=features['incidentLimit'],
        ))
        created += 1
    return created
