import os
import sys
import random
import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, db, socketio
from arena.services.match.scheduler import TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    MATCH_DURATION_SEC = 120.0
    RESPAWN_DELAY_SEC = 3.0
    MIN_PLAYERS = 2
    WORLD_WIDTH = 1920.0
    WORLD_HEIGHT = 1080.0
    PLAYER_RADIUS = 15.0
    SPAWN_X = 100.0
    SPAWN_Y = 100.0
    SPAWN_WIDTH = 800.0
    SPAWN_HEIGHT = 500.0


class ManualScheduler:
    """Fake clock: callbacks only run when the test calls ``advance``."""

    def __init__(self, start=1000.0):
        self.now = start
        self._pending = []
        self._seq = 0

    def time(self):
        return self.now

    def call_later(self, delay, callback, *args):
        handle = TimerHandle(delay)
        self._seq += 1
        self._pending.append((self.now + delay, self._seq, handle, callback, args))
        return handle

    def pending(self):
        return [entry for entry in self._pending if not entry[2].cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = sorted(e for e in self._pending if e[0] <= target)
            if not due:
                break
            entry = due[0]
            self._pending.remove(entry)
            when, _, handle, callback, args = entry
            self.now = when
            if not handle.cancelled:
                callback(*args)
        self.now = target


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def session(flask_app):
    return flask_app.extensions['arena.session']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients; all are disconnected at teardown."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def rng():
    return random.Random(1234)
