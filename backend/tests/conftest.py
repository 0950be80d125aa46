import os
import sys
import pytest

# Ensure the backend root (containing the `quizboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizboard import create_app, db, socketio
from quizboard.services import get_services


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PLAYER_NAME_MAX_LENGTH = 20
    LEADERBOARD_BROADCAST_SIZE = 20
    LEADERBOARD_DEFAULT_LIMIT = 50
    RATE_LIMIT_MAX_REQUESTS = 0
    RATE_LIMIT_WINDOW_SEC = 900
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    # Run fan-out inline so tests observe emits deterministically
    BROADCAST_IN_BACKGROUND = False


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def store(flask_app):
    return get_services(flask_app).store


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass


def make_submission(name='Alice', score=10, **overrides):
    body = {
        'playerName': name,
        'score': score,
        'correctAnswers': 5,
        'totalQuestions': 10,
        'timeTaken': 120,
        'answers': [{'question': 1, 'answer': 'B'}],
    }
    body.update(overrides)
    return body
