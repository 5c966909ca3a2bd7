import os
import sys
import pytest

# Ensure the backend root (containing the `typetrainer` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from typetrainer import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WORDS_PATH = os.path.join(CURRENT_DIR, 'data', 'words.json')
    # Advance to the next word without the usual pause
    ADVANCE_DELAY_MS = 0
    HISTORY_LIMIT = 5
    MASK_PLACEHOLDER = '_'
    CORS_ORIGINS = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import typetrainer.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


class ScheduledTestConfig(TestConfig):
    # Exercise the background-task timer instead of the inline path
    ENABLE_SCHEDULER_IN_TESTS = True
    ADVANCE_DELAY_MS = 300


@pytest.fixture()
def scheduled_sio_client():
    application = create_app(ScheduledTestConfig)
    with application.app_context():
        import typetrainer.models  # noqa: F401
        db.create_all()
        test_client = socketio.test_client(
            application,
            flask_test_client=application.test_client(),
            namespace='/ws'
        )
        yield test_client
        try:
            test_client.disconnect(namespace='/ws')
        except Exception:
            pass
        db.session.remove()
        db.drop_all()
