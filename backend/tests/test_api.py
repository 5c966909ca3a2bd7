from datetime import datetime, timedelta, timezone

from typetrainer import db
from typetrainer.models import TypingScore, format_history_date


def test_levels_listing(client):
    res = client.get('/api/typing/levels')
    assert res.status_code == 200
    levels = {item['name']: item for item in res.get_json()}
    assert levels['beginner'] == {
        'name': 'beginner',
        'sample_count': 30,
        'pool_range': [0, 300],
        'mask_strategy': 'none',
    }
    assert levels['intermediate']['pool_range'] == [0, None]
    assert levels['advanced']['mask_strategy'] == 'partial_random'


def test_submit_score_and_history(client):
    res = client.post('/api/typing/scores', json={'user_id': 3, 'score': '41.7', 'level': 'advanced'})
    assert res.status_code == 201
    stored = res.get_json()
    assert stored['user_id'] == 3
    assert stored['score'] == 41
    assert stored['level'] == 'advanced'
    assert stored['created_at_display']

    history = client.get('/api/typing/history?user_id=3').get_json()
    assert [row['score'] for row in history] == [41]
    # other users do not see it
    assert client.get('/api/typing/history?user_id=4').get_json() == []


def test_history_is_newest_first_and_limited(client):
    for score in range(1, 9):
        db.session.add(TypingScore(user_id=1, score=score, created_at=datetime(2025, 1, score, 12, 0)))
    db.session.commit()

    history = client.get('/api/typing/history?user_id=1').get_json()
    assert [row['score'] for row in history] == [8, 7, 6, 5, 4]

    history = client.get('/api/typing/history?user_id=1&limit=2').get_json()
    assert [row['score'] for row in history] == [8, 7]


def test_anonymous_scores_go_to_user_zero(client):
    assert client.post('/api/typing/scores', json={'score': 12}).status_code == 201
    history = client.get('/api/typing/history').get_json()
    assert history[0]['user_id'] == 0


def test_submit_score_rejects_bad_input(client):
    assert client.post('/api/typing/scores', json={'score': 'fast'}).status_code == 400
    assert client.post('/api/typing/scores', json={}).status_code == 400
    res = client.post('/api/typing/scores', json={'score': 10, 'level': 'expert'})
    assert res.status_code == 400
    assert 'Unknown level' in res.get_json()['error']


def test_home_bundles_levels_history_and_pool_size(client):
    client.post('/api/typing/scores', json={'user_id': 9, 'score': 30})
    res = client.get('/api/typing/?user_id=9')
    assert res.status_code == 200
    data = res.get_json()
    assert len(data['levels']) == 3
    assert data['history'][0]['score'] == 30
    # the test word file has two usable entries
    assert data['word_count'] == 2


def test_history_date_format():
    assert format_history_date(datetime(2025, 1, 5, 14, 3)) == 'Sun Jan 05 2025 14:03'
    assert format_history_date(datetime(2024, 12, 30, 9, 7)) == 'Mon Dec 30 2024 09:07'
    assert format_history_date(None) is None


def test_history_dates_are_utc_unless_an_offset_is_given(client):
    db.session.add(TypingScore(user_id=2, score=20, created_at=datetime(2025, 1, 5, 23, 30)))
    db.session.commit()

    row = client.get('/api/typing/history?user_id=2').get_json()[0]
    assert row['created_at'] == '2025-01-05T23:30:00+00:00'
    assert row['created_at_display'] == 'Sun Jan 05 2025 23:30'

    # browser getTimezoneOffset() for UTC+2 is -120
    row = client.get('/api/typing/history?user_id=2&tz_offset=-120').get_json()[0]
    assert row['created_at'] == '2025-01-05T23:30:00+00:00'
    assert row['created_at_display'] == 'Mon Jan 06 2025 01:30'

    for bad in ('abc', '100000'):
        row = client.get(f'/api/typing/history?user_id=2&tz_offset={bad}').get_json()[0]
        assert row['created_at_display'] == 'Sun Jan 05 2025 23:30'


def test_history_date_format_converts_aware_values():
    eastern = timezone(timedelta(hours=-5))
    value = datetime(2025, 1, 5, 22, 0, tzinfo=eastern)
    assert format_history_date(value) == 'Mon Jan 06 2025 03:00'
    assert format_history_date(datetime(2025, 1, 6, 3, 0), tz=eastern) == 'Sun Jan 05 2025 22:00'
