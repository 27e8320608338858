import pytest

from boundaries.models import BoundaryTemplate, BoundaryViolation


@pytest.fixture
def boundary(client, auth_headers, seeded):
    template = BoundaryTemplate.query.filter_by(title='Time and Availability').one()
    response = client.post('/api/boundaries', json={
        'templateId': template.id,
        'customBoundary': 'No work calls after 9 PM on weekdays.',
        'category': 'personal',
    }, headers=auth_headers)
    assert response.status_code == 201
    return response.get_json()


def test_templates(client, auth_headers, seeded):
    templates = client.get('/api/boundaries/templates', headers=auth_headers).get_json()
    assert len(templates) == 5
    assert client.get('/api/boundaries/templates/999', headers=auth_headers).status_code == 404


def test_create_boundary_validation(client, auth_headers, seeded):
    response = client.post('/api/boundaries', json={
        'customBoundary': 'too short',
        'category': 'cosmic',
    }, headers=auth_headers)
    assert response.status_code == 400
    fields = {detail['field'] for detail in response.get_json()['details']}
    assert fields == {'customBoundary', 'category'}

    response = client.post('/api/boundaries', json={
        'templateId': 999,
        'customBoundary': 'A boundary that is long enough.',
        'category': 'emotional',
    }, headers=auth_headers)
    assert response.status_code == 404


def test_boundary_defaults(boundary):
    assert boundary['isActive'] is True
    assert boundary['violationCount'] == 0
    assert boundary['lastViolated'] is None


def test_update_and_delete_boundary(client, auth_headers, boundary):
    url = f"/api/boundaries/{boundary['id']}"
    response = client.put(url, json={'isActive': False, 'notes': 'Paused while travelling'}, headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['isActive'] is False
    assert response.get_json()['customBoundary'] == boundary['customBoundary']

    assert client.delete(url, headers=auth_headers).status_code == 204
    assert client.get('/api/boundaries', headers=auth_headers).get_json() == []


def test_boundaries_are_private(client, make_user, boundary):
    _, other = make_user('bystander')
    url = f"/api/boundaries/{boundary['id']}"
    assert client.put(url, json={'notes': 'mine now'}, headers=other).status_code == 404
    assert client.delete(url, headers=other).status_code == 404
    response = client.post('/api/boundaries/violations', json={
        'boundaryId': boundary['id'], 'description': 'Called at 11 PM', 'severity': 3
    }, headers=other)
    assert response.status_code == 404


def test_violations_update_boundary_tally(client, auth_headers, boundary):
    for violated_at in ('2026-10-01T23:00:00', '2026-10-10T22:30:00Z', '2026-09-01T21:00:00'):
        response = client.post('/api/boundaries/violations', json={
            'boundaryId': boundary['id'],
            'description': 'Called late about work',
            'severity': 3,
            'violatedAt': violated_at,
        }, headers=auth_headers)
        assert response.status_code == 201

    updated = client.get('/api/boundaries', headers=auth_headers).get_json()[0]
    assert updated['violationCount'] == 3
    assert updated['lastViolated'] == '2026-10-10T22:30:00'

    violations = client.get('/api/boundaries/violations', headers=auth_headers).get_json()
    assert [v['violatedAt'][:10] for v in violations] == ['2026-10-10', '2026-10-01', '2026-09-01']


def test_violation_severity_range(client, auth_headers, boundary):
    response = client.post('/api/boundaries/violations', json={
        'boundaryId': boundary['id'], 'description': 'Shouted', 'severity': 6
    }, headers=auth_headers)
    assert response.status_code == 400
    assert BoundaryViolation.query.count() == 0


def test_deleting_boundary_removes_violations(client, auth_headers, boundary):
    client.post('/api/boundaries/violations', json={
        'boundaryId': boundary['id'], 'description': 'Called late', 'severity': 2
    }, headers=auth_headers)
    client.delete(f"/api/boundaries/{boundary['id']}", headers=auth_headers)
    assert BoundaryViolation.query.count() == 0
