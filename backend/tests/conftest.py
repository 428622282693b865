import os
import sys
import pytest

# Ensure the backend root (containing the `undercover` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from undercover import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    PORT = 3001
    ROOM_DELETION_GRACE_SEC = 300
    MIN_PLAYERS = 3
    DEFAULT_MR_WHITE_COUNT = 1
    DEFAULT_UNDERCOVER_COUNT = 1
    REDACT_SECRETS = False
    REPORT_REJECTED_ACTIONS = False


class ScriptedRandom:
    """Random source that leaves shuffles untouched and always picks the first option."""

    def __init__(self):
        self.shuffled = []

    def shuffle(self, seq):
        self.shuffled.append(list(seq))

    def choice(self, seq):
        return seq[0]


class ManualTimers:
    """Collects spawned timer tasks so a test decides when they fire."""

    def __init__(self):
        self.tasks = []
        self.slept = []

    def spawn(self, target, *args):
        self.tasks.append((target, args))

    def sleep(self, seconds):
        self.slept.append(seconds)

    def fire_all(self):
        tasks, self.tasks = self.tasks, []
        for target, args in tasks:
            target(*args)


@pytest.fixture()
def scripted_random():
    return ScriptedRandom()


@pytest.fixture()
def timers():
    return ManualTimers()


@pytest.fixture()
def flask_app(scripted_random):
    application = create_app(TestConfig)
    application.extensions['undercover.random'] = scripted_random
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['undercover.registry']


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
        except RuntimeError:
            pass
