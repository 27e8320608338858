from datetime import datetime, timedelta

import pytest

from app.extensions import db
from auth.models import User
from conftest import incident_payload
from subscriptions.models import SubscriptionPlan, UNLIMITED
from subscriptions.utils import (
    BILLING_PERIOD, assign_plan, effective_tier, ensure_default_plans, plan_features
)


@pytest.fixture
def plans(app):
    return {plan.name: plan for plan in SubscriptionPlan.query.all()}


def test_default_plans_exist_once(app, plans):
    assert set(plans) == {'free', 'basic', 'pro', 'therapeutic'}
    assert plans['pro'].incident_limit == UNLIMITED
    assert ensure_default_plans() == 0


def test_public_plan_list_hides_inactive_plans(client, plans):
    plans['therapeutic'].is_active = False
    db.session.commit()

    names = [plan['name'] for plan in client.get('/api/subscription/plans').get_json()]
    assert names == ['free', 'basic', 'pro']


def test_upgrade_and_cancel(client, auth_headers, plans):
    response = client.post('/api/subscription/upgrade', json={'planId': plans['pro'].id}, headers=auth_headers)
    assert response.status_code == 200
    body = response.get_json()
    assert body['user']['subscriptionTier'] == 'pro'
    assert body['subscription']['status'] == 'active'
    assert body['subscription']['currentPeriodEnd'] is not None

    current = client.get('/api/subscription', headers=auth_headers).get_json()
    assert current['tier'] == 'pro'
    assert current['features']['exportReports'] is True

    response = client.post('/api/subscription/cancel', headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['subscription']['cancelledAt'] is not None

    # Paid limits apply until the period ends
    current = client.get('/api/subscription', headers=auth_headers).get_json()
    assert current['status'] == 'cancelled'
    assert current['tier'] == 'pro'

    assert client.post('/api/subscription/cancel', headers=auth_headers).status_code == 400


def test_assign_plan_reuses_the_subscription_row(app, make_user, plans):
    user_id, _ = make_user('member', subscription_status='cancelled')
    user = db.session.get(User, user_id)
    now = datetime(2026, 10, 19, 9, 0)

    first = assign_plan(user, plans['basic'], now)
    db.session.commit()
    second = assign_plan(user, plans['pro'], now + timedelta(days=3))
    db.session.commit()

    assert first.id == second.id
    assert user.subscription.plan.name == 'pro'
    assert user.subscription_tier == 'pro'
    assert user.subscription_status == 'active'
    assert second.current_period_end == now + timedelta(days=3) + BILLING_PERIOD
    assert effective_tier(user, now) == 'pro'


def test_cancel_without_subscription(client, auth_headers):
    assert client.post('/api/subscription/cancel', headers=auth_headers).status_code == 400


def test_upgrade_rejects_unknown_or_inactive_plan(client, auth_headers, plans):
    assert client.post('/api/subscription/upgrade', json={'planId': 999}, headers=auth_headers).status_code == 404
    assert client.post('/api/subscription/upgrade', json={}, headers=auth_headers).status_code == 400

    plans['basic'].is_active = False
    db.session.commit()
    response = client.post('/api/subscription/upgrade', json={'planId': plans['basic'].id}, headers=auth_headers)
    assert response.status_code == 400


def test_usage_counts(client, auth_headers):
    client.post('/api/incidents', json=incident_payload(), headers=auth_headers)
    usage = client.get('/api/subscription/usage', headers=auth_headers).get_json()
    assert usage == {
        'incidentsThisMonth': 1,
        'incidentLimit': 10,
        'lessonsCompleted': 0,
        'greyRockAttempts': 0,
    }


def test_export_is_gated_by_plan(client, auth_headers, pro_headers):
    assert client.get('/api/export/csv', headers=auth_headers).status_code == 403
    assert client.get('/api/export/pdf', headers=auth_headers).status_code == 403

    client.post('/api/incidents', json=incident_payload(description='Said "I never said that"'), headers=pro_headers)
    response = client.get('/api/export/csv', headers=pro_headers)
    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    assert 'attachment' in response.headers['Content-Disposition']
    lines = response.get_data(as_text=True).splitlines()
    assert lines[0].startswith('ID,Date,Time,Behavior Type')
    assert len(lines) == 2

    assert client.get('/api/export/pdf', headers=pro_headers).get_json()['incidents'] == 1


def test_effective_tier_after_period_ends(make_user):
    user_id, _ = make_user('lapsed', subscription_tier='pro', subscription_status='cancelled')
    user = db.session.get(User, user_id)
    assert effective_tier(user) == 'free'
    assert plan_features(user)['incidentLimit'] == 10

    user.subscription_status = 'past_due'
    assert effective_tier(user, now=datetime.utcnow() + timedelta(days=1)) == 'free'


def test_plan_row_overrides_default_features(make_user, plans):
    plans['basic'].incident_limit = 25
    plans['basic'].features = {'exportReports': True}
    db.session.commit()

    user_id, _ = make_user('basic_user', subscription_tier='basic')
    features = plan_features(db.session.get(User, user_id))
    assert features['incidentLimit'] == 25
    assert features['exportReports'] is True
    assert features['aiAnalysis'] is True
