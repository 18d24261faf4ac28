import itertools
import os
import random
import sys

import pytest

# Ensure the project root (flat module layout) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from handlers import build_handlers
from matchmaking import MatchmakingQueue
from models import Participant
from payouts import CoinLedger
from room_registry import RoomRegistry
from sessions import SessionTracker


class RecordingTransport:
    def __init__(self):
        self.sent = []  # (event, data, to)
        self.broadcasts = []  # (event, data)
        self.channels = {}  # channel -> set of sids

    def emit(self, event, data, to=None):
        self.sent.append((event, data, to))

    def broadcast(self, event, data):
        self.broadcasts.append((event, data))

    def join(self, sid, channel):
        self.channels.setdefault(channel, set()).add(sid)

    def leave(self, sid, channel):
        self.channels.get(channel, set()).discard(sid)

    def events(self, name, to=None):
        return [data for event, data, dest in self.sent
                if event == name and (to is None or dest == to)]


class ManualTask:
    def __init__(self, delay, fn, args):
        self.delay = delay
        self.fn = fn
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    def __init__(self):
        self.tasks = []

    def schedule(self, delay, fn, *args):
        task = ManualTask(delay, fn, args)
        self.tasks.append(task)
        return task

    def run_pending(self):
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            if not task.cancelled:
                task.fn(*task.args)


class RecordingStore:
    """Stands in for the Firestore client: collects coin increments."""

    def __init__(self):
        self.updates = []

    def collection(self, name):
        return self

    def document(self, user_id):
        self._doc = user_id
        return self

    def update(self, fields):
        self.updates.append((self._doc, fields))


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def sessions():
    return SessionTracker()


@pytest.fixture()
def store():
    return RecordingStore()


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def handlers(rng):
    return build_handlers(rng)


@pytest.fixture()
def registry(transport, sessions, scheduler, handlers, store):
    ids = (f"room{n}" for n in itertools.count(1))
    ticks = itertools.count(1000)
    return RoomRegistry(
        transport,
        sessions,
        scheduler,
        handlers=handlers,
        ledger=CoinLedger(db_getter=lambda: store, spawn=lambda fn, *args: fn(*args)),
        id_factory=lambda: next(ids),
        clock=lambda: float(next(ticks)),
        cleanup_delay=30,
    )


@pytest.fixture()
def matchmaking(registry):
    return MatchmakingQueue(registry)


@pytest.fixture()
def player():
    def make(name, coins=1000):
        return Participant(sid="", user_id=f"user-{name}", username=name, coins=coins)
    return make


# --- Socket.IO integration ---

class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'


@pytest.fixture()
def flask_app():
    import state
    from main import create_app

    state.reset()
    application = create_app(TestConfig)
    yield application
    state.reset()


@pytest.fixture()
def connect(flask_app):
    from extensions import socketio

    clients = []

    def make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        # Flask-SocketIO's test client has no get_sid(); resolve it via the server manager.
        test_client.get_sid = lambda namespace='/': socketio.server.manager.sid_from_eio_sid(
            test_client.eio_sid, namespace)
        clients.append(test_client)
        return test_client

    yield make
    for c in clients:
        try:
            c.disconnect()
        except Exception:
            pass
