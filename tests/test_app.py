from app import create_app
from app.config import TestingConfig
from app.seed import seed_database
from auth.models import User
from boundaries.models import BoundaryTemplate
from education.models import EducationalLesson
from greyrock.models import GreyRockScenario


def test_index(client):
    response = client.get('/')
    assert response.status_code == 200
    assert response.get_json()['docs'] == '/apidocs/'


def test_unknown_route_is_json_404(client):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}


def test_wrong_method_is_json_405(client):
    response = client.put('/api/stats')
    assert response.status_code == 405
    assert response.get_json() == {'error': 'Method not allowed'}


def test_apispec_lists_feature_routes(client):
    paths = client.get('/apispec.json').get_json()['paths']
    for path in ('/api/incidents', '/api/stats', '/api/ai/analyze', '/api/boundaries/violations',
                 '/api/subscription/upgrade', '/api/admin/metrics'):
        assert path in paths


def test_seed_is_idempotent(app):
    first = seed_database()
    assert first == {'lessons': 4, 'scenarios': 3, 'boundaryTemplates': 5, 'plans': 0}
    assert seed_database() == {'lessons': 0, 'scenarios': 0, 'boundaryTemplates': 0, 'plans': 0}
    assert EducationalLesson.query.count() == 4
    assert GreyRockScenario.query.count() == 3
    assert BoundaryTemplate.query.count() == 5


def test_cli_commands(app, make_user):
    make_user('carer')
    runner = app.test_cli_runner()

    result = runner.invoke(args=['seed'])
    assert result.exit_code == 0
    assert 'lessons: 4 added' in result.output

    result = runner.invoke(args=['make-admin', 'carer'])
    assert result.exit_code == 0
    assert User.query.filter_by(username='carer').one().is_admin is True

    result = runner.invoke(args=['make-admin', 'nobody'])
    assert result.exit_code != 0


def test_each_app_gets_its_own_in_memory_store(tmp_path):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / 'other')

    other = create_app(Config)
    with other.app_context():
        assert User.query.count() == 0
