import pytest

from app import create_app


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'SOCKETIO_ASYNC_MODE': 'threading',
    'GAME_RESET_DELAY_SEC': 0.2,
    'LOBBY_CLEANUP_INTERVAL_SEC': 0,
}


class FakeChannel:
    """Records every event delivered to it."""

    def __init__(self, connected=True):
        self.connected = connected
        self.sent = []

    def emit(self, event, data=None):
        self.sent.append((event, data))

    def events(self, name=None):
        return [e for e, _ in self.sent if name is None or e == name]

    def payloads(self, name):
        return [d for e, d in self.sent if e == name]


@pytest.fixture()
def make_channel():
    def _make(connected=True):
        return FakeChannel(connected=connected)
    return _make


@pytest.fixture()
def app_and_socketio():
    return create_app(**TEST_CONFIG)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def lobby_manager(flask_app):
    return flask_app.extensions['lobby_manager']


@pytest.fixture()
def connection_manager(flask_app):
    return flask_app.extensions['connection_manager']


@pytest.fixture()
def connect_player(flask_app, socketio):
    """Factory returning (test_client, sid) for a freshly connected player."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        received = test_client.get_received()
        connected = [pkt for pkt in received if pkt['name'] == 'connected']
        assert connected, received
        clients.append(test_client)
        return test_client, connected[0]['args'][0]['id']

    yield _connect

    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
