import pytest

from conftest import PASSWORD


def test_register_returns_token_and_free_plan(client):
    response = client.post('/api/auth/register', json={
        'username': 'jordan',
        'email': 'Jordan@Example.com',
        'password': PASSWORD,
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body['token']
    assert body['user']['email'] == 'jordan@example.com'
    assert body['user']['subscriptionTier'] == 'free'
    assert 'password_hash' not in body['user']


def test_register_reports_each_invalid_field(client):
    response = client.post('/api/auth/register', json={
        'username': 'x',
        'email': 'not-an-email',
        'password': 'short',
    })
    assert response.status_code == 400
    fields = {detail['field'] for detail in response.get_json()['details']}
    assert fields == {'username', 'email', 'password'}


def test_register_duplicate_username(client, make_user):
    make_user('jordan')
    response = client.post('/api/auth/register', json={
        'username': 'jordan',
        'email': 'other@example.com',
        'password': PASSWORD,
    })
    assert response.status_code == 409


def test_login_with_username_or_email(client, make_user):
    make_user('jordan')
    for identifier in ({'username': 'jordan'}, {'email': 'jordan@example.com'}):
        response = client.post('/api/auth/login', json={**identifier, 'password': PASSWORD})
        assert response.status_code == 200
        assert response.get_json()['token']


def test_login_rejects_wrong_password(client, make_user):
    make_user('jordan')
    response = client.post('/api/auth/login', json={'username': 'jordan', 'password': 'Wrong#Pass1'})
    assert response.status_code == 401


def test_login_rejects_disabled_account(client, make_user):
    make_user('jordan', is_active=False)
    response = client.post('/api/auth/login', json={'username': 'jordan', 'password': PASSWORD})
    assert response.status_code == 403


def test_me_requires_token(client, auth_headers):
    assert client.get('/api/auth/me').status_code == 401

    response = client.get('/api/auth/me', headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['username'] == 'alice'


def test_password_rules_report_first_failure():
    from auth.utils import password_error

    assert password_error('') == 'Password is required'
    assert password_error('Ab#1') == 'Password must be at least 8 characters long'
    assert password_error('lowercase#1') == 'Password must contain an uppercase letter'
    assert password_error('NoSpecial12') == 'Password must contain a special character'
    assert password_error(PASSWORD) is None


def test_register_with_non_object_body_reports_fields(client):
    response = client.post('/api/auth/register', json=['x'])
    assert response.status_code == 400
    fields = {detail['field'] for detail in response.get_json()['details']}
    assert fields == {'username', 'email', 'password'}


def test_register_treats_non_string_values_as_missing(client):
    response = client.post('/api/auth/register', json={'username': 42, 'email': ['a@b.co'], 'password': PASSWORD})
    assert response.status_code == 400
    fields = {detail['field'] for detail in response.get_json()['details']}
    assert fields == {'username', 'email'}


@pytest.mark.parametrize('body', [
    {'email': 5, 'password': 'x'},
    {'username': 'jordan', 'password': 12345678},
    ['jordan'],
    'jordan',
])
def test_login_rejects_malformed_bodies(client, make_user, body):
    make_user('jordan')
    response = client.post('/api/auth/login', json=body)
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Missing username/email or password'}
