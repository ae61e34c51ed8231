import logging
import threading
from datetime import timedelta

from lobby import LobbyManager, GameLobby
from utils import helpers


def test_create_lobby_registers_host(make_channel):
    manager = LobbyManager()

    lobby, error = manager.create_lobby('host', make_channel())

    assert error is None
    assert len(lobby.code) == 4 and lobby.code.isdigit()
    assert 1000 <= int(lobby.code) <= 9999
    assert manager.get_lobby(lobby.code) is lobby
    assert lobby.player_ids() == ['host']
    assert lobby.host_id == 'host'


def test_unique_code_regenerates_on_collision(monkeypatch):
    draws = iter(['1234', '1234', '4321'])
    monkeypatch.setattr(helpers, 'generate_lobby_code', lambda: next(draws))

    assert helpers.generate_unique_lobby_code({'1234'}) == '4321'


def test_concurrent_creates_get_distinct_codes(make_channel):
    manager = LobbyManager()
    codes = []
    codes_lock = threading.Lock()

    def worker(index):
        for n in range(25):
            lobby, error = manager.create_lobby(f'p{index}-{n}', make_channel())
            assert error is None
            with codes_lock:
                codes.append(lobby.code)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(codes) == 200
    assert len(set(codes)) == 200
    assert manager.lobby_count() == 200


def test_create_fails_when_no_codes_left(make_channel):
    manager = LobbyManager(max_lobbies=1)
    manager.create_lobby('a', make_channel())

    lobby, error = manager.create_lobby('b', make_channel())

    assert lobby is None
    assert error.code == 'server_full'


def test_join_lobby(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('host', make_channel())

    joined, error = manager.join_lobby(lobby.code, 'guest', make_channel())

    assert error is None
    assert joined is lobby
    assert lobby.player_ids() == ['host', 'guest']


def test_join_unknown_code(make_channel):
    manager = LobbyManager()

    lobby, error = manager.join_lobby('0000', 'guest', make_channel())

    assert lobby is None
    assert error.code == 'lobby_not_found'
    assert error.to_dict() == {'reason': 'lobby_not_found', 'error': 'Lobby not found'}


def test_join_full_lobby_leaves_state_unchanged(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('host', make_channel())
    manager.join_lobby(lobby.code, 'guest', make_channel())
    before = lobby.snapshot()

    joined, error = manager.join_lobby(lobby.code, 'third', make_channel())

    assert joined is None
    assert error.code == 'lobby_full'
    assert lobby.snapshot() == before


def test_leave_keeps_lobby_with_members(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('host', make_channel())
    manager.join_lobby(lobby.code, 'guest', make_channel())

    left, deleted = manager.leave_lobby(lobby.code, 'host')

    assert left is lobby
    assert deleted is False
    assert manager.get_lobby(lobby.code) is lobby
    assert lobby.host_id == 'guest'


def test_leave_deletes_empty_lobby(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('host', make_channel())

    left, deleted = manager.leave_lobby(lobby.code, 'host')

    assert left is lobby
    assert deleted is True
    assert manager.get_lobby(lobby.code) is None


def test_leave_by_non_member_is_noop(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('host', make_channel())

    assert manager.leave_lobby(lobby.code, 'stranger') == (None, False)
    assert manager.leave_lobby('0000', 'host') == (None, False)
    assert manager.get_lobby(lobby.code) is lobby


def test_remove_only_matches_same_lobby_object(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('host', make_channel())
    impostor = GameLobby(lobby.code, 'other')

    manager._remove_lobby(impostor)

    assert manager.get_lobby(lobby.code) is lobby


def test_cleanup_reclaims_only_empty_stale_lobbies(make_channel):
    manager = LobbyManager(max_idle_seconds=3600)
    stale, _ = manager.create_lobby('a', make_channel())
    busy, _ = manager.create_lobby('b', make_channel())
    fresh, _ = manager.create_lobby('c', make_channel())

    # Empty the lobbies behind the registry's back so they stay registered
    stale.players.clear()
    fresh.players.clear()
    stale.created_at -= timedelta(hours=2)
    busy.created_at -= timedelta(hours=2)

    reclaimed = manager.cleanup_inactive_lobbies()

    assert reclaimed == 1
    assert manager.get_lobby(stale.code) is None
    assert stale.closed
    assert manager.get_lobby(busy.code) is busy
    assert manager.get_lobby(fresh.code) is fresh


def test_cleanup_with_explicit_threshold(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('a', make_channel())
    lobby.players.clear()

    later = lobby.created_at + timedelta(minutes=10)
    assert manager.cleanup_inactive_lobbies(now=later, max_idle=timedelta(minutes=30)) == 0
    assert manager.cleanup_inactive_lobbies(now=later, max_idle=timedelta(minutes=5)) == 1


def test_active_lobby_summaries(make_channel):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('host', make_channel())
    manager.join_lobby(lobby.code, 'guest', make_channel())

    summaries = manager.get_active_lobbies()

    assert len(summaries) == 1
    item = summaries[0].to_dict()
    assert item['code'] == lobby.code
    assert item['playerCount'] == 2
    assert item['gameState'] == 'waiting'
    assert item['createdAt'] == lobby.created_at.isoformat()


def test_cleanup_logs_expiry_reason(make_channel, caplog):
    manager = LobbyManager()
    lobby, _ = manager.create_lobby('a', make_channel())
    lobby.players.clear()
    caplog.set_level(logging.INFO, logger='lobby.manager')

    manager.cleanup_inactive_lobbies(now=lobby.created_at + timedelta(hours=2))

    assert f"Cleaned up lobby {lobby.code}: Lobby expired" in caplog.text
