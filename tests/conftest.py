"""Shared fixtures: a fresh in-memory app per test and helpers for users."""
import pytest

from app import create_app
from app.config import TestingConfig
from app.extensions import db
from auth.models import User

PASSWORD = 'Secure#Pass1'


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(client):
    """Register a user and return ``(user_id, headers)``.

    Keyword arguments are set on the stored ``User`` row afterwards, e.g.
    ``make_user('ann', subscription_tier='pro')``.
    """
    def _make_user(username='alice', **attributes):
        response = client.post('/api/auth/register', json={
            'username': username,
            'email': f'{username}@example.com',
            'password': PASSWORD,
        })
        assert response.status_code == 201, response.get_json()
        body = response.get_json()

        if attributes:
            user = db.session.get(User, body['user']['id'])
            for name, value in attributes.items():
                setattr(user, name, value)
            db.session.commit()

        return body['user']['id'], {'Authorization': f"Bearer {body['token']}"}
    return _make_user


@pytest.fixture
def auth_headers(make_user):
    _, headers = make_user('alice')
    return headers


@pytest.fixture
def pro_headers(make_user):
    _, headers = make_user('paula', subscription_tier='pro')
    return headers


@pytest.fixture
def admin_headers(make_user):
    _, headers = make_user('root_admin', is_admin=True)
    return headers


def incident_payload(**overrides):
    payload = {
        'date': '2026-10-12',
        'time': '19:45',
        'behaviorType': 'gaslighting',
        'description': 'Told me the conversation from yesterday never happened.',
        'feelings': 'Confused',
        'moodBefore': 'calm',
        'moodAfter': 'confused',
        'safetyRating': 3,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def seeded(app):
    """Load the default lessons, scenarios and boundary templates."""
    from app.seed import seed_database
    return seed_database()
