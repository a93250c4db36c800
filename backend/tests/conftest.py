import random
from collections import defaultdict

import pytest

from sketchguess.config import Config
from sketchguess.game.registry import RoomRegistry
from sketchguess.game.rounds import GameSettings, RoundMachine
from sketchguess.game.session import GameSession
from sketchguess.game.timers import ManualScheduler
from sketchguess.game.words import WordBank
from sketchguess.realtime.transport import SocketIOTransport
from sketchguess.server import create_app


class FakeServer:
    """Mirrors python-socketio's ``Server.emit`` signature: one ``data`` slot."""

    def __init__(self):
        self.groups = defaultdict(set)
        self.log = []
        self.inbox = defaultdict(list)

    def enter_room(self, sid, room, namespace=None):
        self.groups[room].add(sid)

    def leave_room(self, sid, room, namespace=None):
        self.groups[room].discard(sid)

    def emit(self, event, data=None, to=None, room=None, skip_sid=None, namespace=None, callback=None):
        # A tuple spreads into several client arguments, like on the wire.
        if data is None:
            args = ()
        elif isinstance(data, tuple):
            args = data
        else:
            args = (data,)
        self.log.append((event, args, to, skip_sid))
        targets = set(self.groups.get(to, ())) if to in self.groups else {to}
        targets.discard(skip_sid)
        for sid in targets:
            self.inbox[sid].append((event, args))


class FakeSocketIO:
    def __init__(self):
        self.server = FakeServer()

    def emit(self, event, *args, **kwargs):
        # Flask-SocketIO forwards positional arguments straight to the server.
        self.server.emit(event, *args, **kwargs)


class RecordingTransport(SocketIOTransport):
    """Real transport over an in-memory server that remembers who got what."""

    def __init__(self):
        super().__init__(FakeSocketIO())
        server = self.socketio.server
        self.groups = server.groups
        self.log = server.log
        self.inbox = server.inbox

    def received(self, sid, event=None):
        return [args for name, args in self.inbox[sid] if event is None or name == event]

    def events(self, sid):
        return [name for name, _ in self.inbox[sid]]

    def clear(self):
        self.log.clear()
        self.inbox.clear()


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    TRUST_PROXY_HEADERS = False
    LOG_LEVEL = "WARNING"


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def word_bank():
    return WordBank(["cat", "dog", "house", "tree", "pizza"], rng=random.Random(7))


@pytest.fixture()
def settings():
    return GameSettings()


@pytest.fixture()
def session(transport, scheduler, word_bank, settings):
    return GameSession(
        transport=transport,
        scheduler=scheduler,
        machine=RoundMachine(settings, word_bank=word_bank),
        registry=RoomRegistry(capacity=10),
    )


@pytest.fixture()
def started_room(session, scheduler, transport):
    """Room ABCD with Alice and Bob, first round offered to Alice."""
    session.create_room("alice", "abcd", "Alice")
    session.join_room("bob", "ABCD", "Bob")
    scheduler.advance(3)
    room = session.registry.get("ABCD")
    assert room.state == "choosing"
    assert room.drawer_id == "alice"
    transport.clear()
    return room


@pytest.fixture()
def flask_env(word_bank):
    virtual = ManualScheduler()
    app, socketio = create_app(TestConfig, scheduler=virtual, word_bank=word_bank)
    return app, socketio, virtual


@pytest.fixture()
def flask_app(flask_env):
    return flask_env[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_env):
    app, socketio, _ = flask_env
    clients = []

    def _make():
        test_client = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
