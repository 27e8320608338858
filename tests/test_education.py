from education.models import EducationalLesson, UserProgress


def test_lessons_are_grouped_by_category_and_difficulty(client, auth_headers, seeded):
    lessons = client.get('/api/educational/lessons', headers=auth_headers).get_json()
    assert len(lessons) == 4
    assert [lesson['category'] for lesson in lessons] == sorted(lesson['category'] for lesson in lessons)
    assert lessons[0]['keyTakeaways']

    beginner = client.get('/api/educational/lessons?difficulty=beginner', headers=auth_headers).get_json()
    assert {lesson['title'] for lesson in beginner} == {
        'Understanding Gaslighting', 'Love-Bombing and Idealization'
    }


def test_get_missing_lesson(client, auth_headers, seeded):
    assert client.get('/api/educational/lessons/999', headers=auth_headers).status_code == 404


def test_complete_lesson_is_an_upsert(client, auth_headers, seeded):
    lesson = EducationalLesson.query.filter_by(title='Breaking Trauma Bonds').one()
    url = f'/api/educational/complete/{lesson.id}'

    first = client.post(url, json={'timeSpent': 120}, headers=auth_headers)
    assert first.status_code == 200
    assert first.get_json()['completed'] is True

    second = client.post(url, json={'timeSpent': 300}, headers=auth_headers)
    assert second.get_json()['id'] == first.get_json()['id']
    assert second.get_json()['timeSpent'] == 300
    assert UserProgress.query.count() == 1

    progress = client.get('/api/educational/progress', headers=auth_headers).get_json()
    assert [(p['lessonId'], p['completed']) for p in progress] == [(lesson.id, True)]


def test_complete_validates_input(client, auth_headers, seeded):
    lesson = EducationalLesson.query.first()
    response = client.post(
        f'/api/educational/complete/{lesson.id}', json={'timeSpent': -5}, headers=auth_headers
    )
    assert response.status_code == 400
    assert client.post('/api/educational/complete/999', json={}, headers=auth_headers).status_code == 404
