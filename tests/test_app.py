import time
from datetime import datetime, timedelta

from app import create_app
from lobby import GameLobby


SWEEP_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'SOCKETIO_ASYNC_MODE': 'threading',
    'LOBBY_CLEANUP_INTERVAL_SEC': 0.05,
    'LOBBY_MAX_IDLE_SEC': 0.01,
}


def test_background_worker_reclaims_stale_lobby():
    app, _ = create_app(**SWEEP_CONFIG)
    lobby_manager = app.extensions['lobby_manager']
    ghost = GameLobby('1000', 'ghost', created_at=datetime.now() - timedelta(hours=1))
    with lobby_manager._lock:
        lobby_manager.active_lobbies[ghost.code] = ghost

    deadline = time.time() + 3.0
    while time.time() < deadline and lobby_manager.get_lobby(ghost.code) is not None:
        time.sleep(0.05)

    assert lobby_manager.get_lobby(ghost.code) is None
    assert ghost.closed


def test_no_worker_when_interval_disabled():
    app, _ = create_app(**{**SWEEP_CONFIG, 'LOBBY_CLEANUP_INTERVAL_SEC': 0})
    lobby_manager = app.extensions['lobby_manager']
    ghost = GameLobby('1000', 'ghost', created_at=datetime.now() - timedelta(hours=2))
    lobby_manager.active_lobbies[ghost.code] = ghost

    time.sleep(0.2)

    assert lobby_manager.get_lobby(ghost.code) is ghost
