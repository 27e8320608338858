import pytest

from conftest import incident_payload
from subscriptions.models import SubscriptionPlan


@pytest.mark.parametrize('method, url', [
    ('get', '/api/admin/metrics'),
    ('get', '/api/admin/users'),
    ('patch', '/api/admin/users/1'),
    ('get', '/api/admin/subscription-plans'),
    ('post', '/api/admin/subscription-plans'),
    ('patch', '/api/admin/subscription-plans/1/toggle-status'),
])
def test_non_admins_are_forbidden(client, auth_headers, method, url):
    response = getattr(client, method)(url, json={}, headers=auth_headers)
    assert response.status_code == 403
    assert response.get_json()['error'] == 'Admin access required'


def test_admin_requires_token(client):
    assert client.get('/api/admin/metrics').status_code == 401


def test_metrics(client, make_user, admin_headers):
    make_user('free_user')
    _, pro = make_user('pro_user', subscription_tier='pro')
    make_user('basic_user', subscription_tier='basic')
    make_user('churned', subscription_tier='basic', subscription_status='cancelled')
    client.post('/api/incidents', json=incident_payload(), headers=pro)

    metrics = client.get('/api/admin/metrics', headers=admin_headers).get_json()

    assert metrics['totalUsers'] == 5
    assert metrics['newSignups'] == 5
    assert metrics['activeSubscriptions'] == 2
    assert metrics['monthlyRevenue'] == 999 + 499
    assert metrics['churnRate'] == 33.3
    assert metrics['popularFeatures']['incidents'] == 1


def test_list_and_update_users(client, make_user, admin_headers):
    user_id, headers = make_user('member')
    client.post('/api/incidents', json=incident_payload(), headers=headers)

    users = client.get('/api/admin/users', headers=admin_headers).get_json()
    member = next(u for u in users if u['id'] == user_id)
    assert member['incidentsThisMonth'] == 1

    response = client.patch(f'/api/admin/users/{user_id}', json={
        'subscriptionTier': 'therapeutic',
        'subscriptionStatus': 'active',
        'isAdmin': True,
    }, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['subscriptionTier'] == 'therapeutic'
    assert response.get_json()['isAdmin'] is True

    assert client.get('/api/admin/metrics', headers=headers).status_code == 200


def test_update_user_tier_moves_subscription_row(client, make_user, admin_headers):
    user_id, headers = make_user('member')
    pro = SubscriptionPlan.query.filter_by(name='pro').one()
    assert client.post('/api/subscription/upgrade', json={'planId': pro.id}, headers=headers).status_code == 200
    client.post('/api/subscription/cancel', headers=headers)

    response = client.patch(f'/api/admin/users/{user_id}', json={'subscriptionTier': 'basic'},
                            headers=admin_headers)
    assert response.status_code == 200

    current = client.get('/api/subscription', headers=headers).get_json()
    assert current['tier'] == 'basic'
    assert current['status'] == 'active'
    assert current['subscription']['plan']['name'] == 'basic'
    assert current['subscription']['status'] == 'active'
    assert current['subscription']['cancelledAt'] is None


def test_update_user_tier_creates_missing_subscription_row(client, make_user, admin_headers):
    user_id, headers = make_user('member')
    assert client.get('/api/subscription', headers=headers).get_json()['subscription'] is None

    client.patch(f'/api/admin/users/{user_id}', json={
        'subscriptionTier': 'pro', 'subscriptionStatus': 'past_due'
    }, headers=admin_headers)

    current = client.get('/api/subscription', headers=headers).get_json()
    assert current['subscription']['plan']['name'] == 'pro'
    assert current['subscription']['status'] == 'past_due'
    assert current['status'] == 'past_due'
    assert current['subscription']['currentPeriodEnd'] is not None


def test_update_user_rejects_unknown_tier_and_user(client, make_user, admin_headers):
    user_id, _ = make_user('member')
    response = client.patch(f'/api/admin/users/{user_id}', json={'subscriptionTier': 'platinum'},
                            headers=admin_headers)
    assert response.status_code == 400
    response = client.patch(f'/api/admin/users/{user_id}', json={'subscriptionStatus': 'frozen'},
                            headers=admin_headers)
    assert response.status_code == 400
    assert client.patch('/api/admin/users/999', json={}, headers=admin_headers).status_code == 404


def test_create_and_toggle_plan(client, admin_headers):
    response = client.post('/api/admin/subscription-plans', json={
        'name': 'family',
        'displayName': 'Family',
        'price': 1499,
        'currency': 'USD',
        'interval': 'month',
        'incidentLimit': 100,
        'features': {'aiAnalysis': True},
    }, headers=admin_headers)
    assert response.status_code == 201
    plan = response.get_json()
    assert plan['currency'] == 'usd'
    assert plan['features'] == {'aiAnalysis': True}

    duplicate = client.post('/api/admin/subscription-plans', json={
        'name': 'family', 'displayName': 'Family again', 'price': 0
    }, headers=admin_headers)
    assert duplicate.status_code == 409

    toggled = client.patch(f"/api/admin/subscription-plans/{plan['id']}/toggle-status", headers=admin_headers)
    assert toggled.get_json()['isActive'] is False
    assert SubscriptionPlan.query.filter_by(name='family', is_active=False).count() == 1

    public = [p['name'] for p in client.get('/api/subscription/plans').get_json()]
    assert 'family' not in public
    admin_view = [p['name'] for p in client.get('/api/admin/subscription-plans', headers=admin_headers).get_json()]
    assert 'family' in admin_view

    assert client.patch('/api/admin/subscription-plans/999/toggle-status',
                        headers=admin_headers).status_code == 404


def test_create_plan_validation(client, admin_headers):
    response = client.post('/api/admin/subscription-plans', json={
        'name': 'Bad Name!', 'displayName': '', 'price': -1, 'incidentLimit': -5
    }, headers=admin_headers)
    assert response.status_code == 400
    fields = {detail['field'] for detail in response.get_json()['details']}
    assert fields == {'name', 'displayName', 'price', 'incidentLimit'}
