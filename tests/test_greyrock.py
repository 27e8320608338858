import pytest

from ai import utils as ai_utils
from greyrock.models import GreyRockScenario
from greyrock.utils import build_evaluation_prompt, parse_score


@pytest.fixture
def scenario(seeded):
    return GreyRockScenario.query.filter_by(title='Family Guilt Trip').one()


@pytest.mark.parametrize('text, expected', [
    ('Score: 85\nGood neutrality.', 85),
    ('**Score:** 40 - too defensive', 40),
    ('I would rate this 72/100.', 72),
    ('Overall 90 out of 100', 90),
    ('Score: 250', None),
    ('No number given.', None),
    (None, None),
])
def test_parse_score(text, expected):
    assert parse_score(text) == expected


def test_evaluation_prompt_includes_scenario_examples(scenario):
    prompt = build_evaluation_prompt(scenario, 'Okay.')
    assert scenario.provocative_message in prompt
    assert 'Okay.' in prompt
    assert "I call when I can. I'll talk to you later." in prompt
    assert 'Score:' in prompt


def test_list_and_filter_scenarios(client, auth_headers, seeded):
    scenarios = client.get('/api/greyrock/scenarios', headers=auth_headers).get_json()
    assert len(scenarios) == seeded['scenarios'] == 3

    advanced = client.get('/api/greyrock/scenarios?difficulty=advanced', headers=auth_headers).get_json()
    assert [s['title'] for s in advanced] == ['Ex-Partner Drama']

    assert client.get('/api/greyrock/scenarios/999', headers=auth_headers).status_code == 404


def test_evaluate_records_scored_attempt(client, auth_headers, scenario, monkeypatch):
    prompts = []

    def fake_chat(prompt, system_prompt=ai_utils.SYSTEM_PROMPT, max_tokens=None):
        prompts.append(system_prompt)
        return 'Score: 88\nBrief and neutral. Nice work.'

    monkeypatch.setattr(ai_utils, 'chat_completion', fake_chat)

    response = client.post(
        f'/api/greyrock/scenarios/{scenario.id}/evaluate',
        json={'response': 'Okay.'},
        headers=auth_headers
    )

    assert response.status_code == 201
    attempt = response.get_json()
    assert attempt['aiScore'] == 88
    assert attempt['aiFeedback'].startswith('Score: 88')
    assert attempt['userResponse'] == 'Okay.'
    assert prompts and 'grey rock' in prompts[0]

    history = client.get('/api/greyrock/attempts', headers=auth_headers).get_json()
    assert [a['id'] for a in history] == [attempt['id']]


def test_evaluate_upstream_failure(client, auth_headers, scenario, monkeypatch):
    def failing_chat(*args, **kwargs):
        raise ai_utils.AIServiceError('boom')

    monkeypatch.setattr(ai_utils, 'chat_completion', failing_chat)

    response = client.post(
        f'/api/greyrock/scenarios/{scenario.id}/evaluate',
        json={'response': 'Okay.'},
        headers=auth_headers
    )
    assert response.status_code == 500
    assert client.get('/api/greyrock/attempts', headers=auth_headers).get_json() == []


def test_evaluate_requires_response_text(client, auth_headers, scenario):
    response = client.post(
        f'/api/greyrock/scenarios/{scenario.id}/evaluate', json={'response': '   '}, headers=auth_headers
    )
    assert response.status_code == 400


def test_create_attempt_directly(client, make_user, scenario):
    _, headers = make_user('practice')
    response = client.post('/api/greyrock/attempts', json={
        'scenarioId': scenario.id,
        'userResponse': 'I understand you\'re upset.',
        'aiScore': 75,
    }, headers=headers)
    assert response.status_code == 201

    response = client.post('/api/greyrock/attempts', json={
        'scenarioId': 999,
        'userResponse': 'Okay.',
    }, headers=headers)
    assert response.status_code == 404

    _, other = make_user('someone_else')
    assert client.get('/api/greyrock/attempts', headers=other).get_json() == []
