from conftest import make_submission
from quizboard.errors import BroadcastError, RankComputationError, StorageError
from quizboard.services import get_services


def test_submit_returns_rank(client):
    res = client.post('/api/submit-quiz', json=make_submission('Alice', 10))
    assert res.status_code == 200
    data = res.get_json()
    assert data['success'] is True
    assert data['rank'] == 1
    assert data['message']


def test_submit_ranks_by_score_then_completion(client):
    assert client.post('/api/submit-quiz', json=make_submission('A', 10)).get_json()['rank'] == 1
    assert client.post('/api/submit-quiz', json=make_submission('B', 20)).get_json()['rank'] == 1
    # Same score as B but later, so behind B
    assert client.post('/api/submit-quiz', json=make_submission('C', 20)).get_json()['rank'] == 2

    board = client.get('/api/leaderboard').get_json()
    assert [row['playerName'] for row in board] == ['B', 'C', 'A']
    assert [row['rank'] for row in board] == [1, 2, 3]


def test_submit_rejects_long_name_without_storing(client, store):
    before = store.count()
    res = client.post('/api/submit-quiz', json=make_submission('x' * 21))
    assert res.status_code == 400
    assert 'error' in res.get_json()
    assert store.count() == before


def test_submit_accepts_twenty_character_name(client):
    res = client.post('/api/submit-quiz', json=make_submission('x' * 20))
    assert res.status_code == 200


def test_submit_rejects_bad_payloads(client, store):
    bad_bodies = [
        make_submission(''),
        {k: v for k, v in make_submission().items() if k != 'playerName'},
        make_submission(score='10'),
        make_submission(score=9.5),
        make_submission(correctAnswers=None),
        make_submission(correctAnswers=True),
        make_submission(totalQuestions='ten'),
        make_submission(timeTaken=None),
        make_submission(playerName=42),
    ]
    for body in bad_bodies:
        res = client.post('/api/submit-quiz', json=body)
        assert res.status_code == 400, body
        assert 'error' in res.get_json()
    assert store.count() == 0


def test_submit_rejects_non_json_body(client, store):
    res = client.post('/api/submit-quiz', data='not json', content_type='text/plain')
    assert res.status_code == 400
    assert store.count() == 0


def test_submit_storage_failure_is_500(flask_app, client, monkeypatch):
    store = get_services(flask_app).store

    def broken_insert(fields):
        raise StorageError()

    monkeypatch.setattr(store, 'insert', broken_insert)
    res = client.post('/api/submit-quiz', json=make_submission())
    assert res.status_code == 500
    assert res.get_json() == {'error': 'Failed to save result'}


def test_rank_failure_keeps_committed_result(flask_app, client, monkeypatch):
    store = get_services(flask_app).store

    def broken_rank(score, result_id):
        raise RankComputationError()

    monkeypatch.setattr(store, 'rank_of', broken_rank)
    res = client.post('/api/submit-quiz', json=make_submission())
    assert res.status_code == 500
    assert res.get_json() == {'error': 'Rank computation failed'}
    # The insert already committed and is not rolled back
    assert store.count() == 1


def test_broadcast_failure_does_not_fail_submission(flask_app, client, monkeypatch):
    channel = get_services(flask_app).channel

    def broken_publish(*args, **kwargs):
        raise BroadcastError()

    monkeypatch.setattr(channel, 'publish_score_update', broken_publish)
    res = client.post('/api/submit-quiz', json=make_submission())
    assert res.status_code == 200
    assert res.get_json()['rank'] == 1


def test_empty_leaderboard_and_stats(client):
    assert client.get('/api/leaderboard').get_json() == []
    assert client.get('/api/stats').get_json() == {
        'totalParticipants': 0,
        'averageScore': 0,
        'highestScore': 0,
        'lowestScore': 0,
    }


def test_stats_after_submissions(client):
    for name, score in [('A', 10), ('B', 20), ('C', 30)]:
        client.post('/api/submit-quiz', json=make_submission(name, score))
    stats = client.get('/api/stats').get_json()
    assert stats['totalParticipants'] == 3
    assert stats['averageScore'] == 20
    assert stats['highestScore'] == 30
    assert stats['lowestScore'] == 10


def test_leaderboard_limit(client):
    for i in range(5):
        client.post('/api/submit-quiz', json=make_submission(f'P{i}', i))
    assert len(client.get('/api/leaderboard?limit=2').get_json()) == 2
    # Unusable limits fall back to the default
    assert len(client.get('/api/leaderboard?limit=abc').get_json()) == 5
    assert len(client.get('/api/leaderboard?limit=0').get_json()) == 5
    assert len(client.get('/api/leaderboard?limit=-3').get_json()) == 5


def test_leaderboard_row_shape(client):
    client.post('/api/submit-quiz', json=make_submission('Alice', 42))
    row = client.get('/api/leaderboard').get_json()[0]
    assert set(row) == {
        'playerName', 'score', 'correctAnswers', 'totalQuestions',
        'timeTaken', 'completionTime', 'rank',
    }
    assert row['score'] == 42
    assert row['completionTime'].endswith('Z')


def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'healthy'
    assert data['uptime'] >= 0
    assert 'timestamp' in data


def test_unknown_route_is_json_404(client):
    res = client.get('/api/does-not-exist')
    assert res.status_code == 404
    assert 'error' in res.get_json()


def test_security_headers(client):
    res = client.get('/api/health')
    assert res.headers['X-Content-Type-Options'] == 'nosniff'
    assert 'Content-Security-Policy' in res.headers


def test_leaderboard_limit_above_default_is_honoured(client):
    for i in range(60):
        client.post('/api/submit-quiz', json=make_submission(f'P{i}', i))
    assert len(client.get('/api/leaderboard').get_json()) == 50
    board = client.get('/api/leaderboard?limit=55').get_json()
    assert len(board) == 55
    assert [row['rank'] for row in board] == list(range(1, 56))
    assert len(client.get('/api/leaderboard?limit=5000').get_json()) == 60
