import os
import sys
import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scoreboard import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    SHOT_CLOCK_RESET_SEC = 24
    RECENT_GAMES_LIMIT = 10


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import scoreboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def register(client, username='coach', password='password'):
    return client.post('/register', json={'username': username, 'password': password})


@pytest.fixture()
def auth_client(flask_app):
    test_client = flask_app.test_client()
    res = register(test_client)
    assert res.status_code == 201
    return test_client


@pytest.fixture()
def make_game(auth_client):
    def _make(sport_id='basketball', team1_name='Home', team2_name='Away'):
        res = auth_client.post('/api/games', json={
            'sport_id': sport_id,
            'team1_name': team1_name,
            'team2_name': team2_name,
        })
        assert res.status_code == 201, res.get_json()
        return res.get_json()
    return _make


def socket_for(flask_app, http_client):
    """Socket.IO client sharing the session cookie of ``http_client``."""
    return socketio.test_client(flask_app, flask_test_client=http_client, namespace='/ws')


@pytest.fixture()
def sio_client(flask_app, auth_client):
    test_client = socket_for(flask_app, auth_client)
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


class LiveClockConfig(TestConfig):
    ENABLE_SCHEDULER_IN_TESTS = True
    CLOCK_TICK_SEC = 0.05


@pytest.fixture()
def live_app(tmp_path):
    class FileConfig(LiveClockConfig):
        # File-backed: tick workers open their own connections.
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'live.db'}"

    application = create_app(FileConfig)
    with application.app_context():
        import scoreboard.models  # noqa: F401
        db.create_all()
        yield application
        from scoreboard.services.games import scheduler
        for game_id, clock in list(scheduler._active_clocks):
            scheduler.cancel_clock(game_id, clock)
        socketio.sleep(LiveClockConfig.CLOCK_TICK_SEC * 4)
        db.session.remove()
        db.drop_all()
