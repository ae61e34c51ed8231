"""
Main lobby management system.

Owns the registry of active lobbies keyed by their 4-digit code. Handles
lobby creation, joining, leaving and the periodic reclamation of empty
lobbies. All state is in memory.
"""

import logging
import threading
from typing import Optional, List, Dict, Tuple, Any
from datetime import datetime, timedelta
from .game_lobby import GameLobby
from .models import LobbyError, LobbyListItem
from utils.constants import GAME_CONFIG
from utils.helpers import generate_unique_lobby_code, lobby_code_capacity

logger = logging.getLogger(__name__)

class LobbyManager:
    """Registry of active lobbies."""

    def __init__(self, max_players: int = GAME_CONFIG['MAX_PLAYERS'],
                 max_lobbies: Optional[int] = None,
                 max_idle_seconds: float = GAME_CONFIG['LOBBY_MAX_IDLE']):
        """
        Initialize the lobby registry.

        Args:
            max_players: Capacity of every lobby created here
            max_lobbies: Upper bound on registered lobbies, capped by the code space
            max_idle_seconds: Age after which an empty lobby is reclaimed
        """
        self.max_players = max_players
        capacity = lobby_code_capacity()
        self.max_lobbies = min(max_lobbies, capacity) if max_lobbies else capacity
        self.max_idle = timedelta(seconds=max_idle_seconds)
        self.active_lobbies: Dict[str, GameLobby] = {}  # code -> GameLobby
        self._lock = threading.Lock()

    def create_lobby(self, host_id: str,
                     channel: Any) -> Tuple[Optional[GameLobby], Optional[LobbyError]]:
        """
        Create a new lobby with ``host_id`` as its first member and host.

        Code generation and registration happen under the registry lock, so
        two concurrent creations can never register the same code.

        Args:
            host_id: Connection ID of the creator
            channel: Channel of the creator

        Returns:
            tuple: (lobby, error)
        """
        with self._lock:
            if len(self.active_lobbies) >= self.max_lobbies:
                logger.warning(f"Cannot create lobby for {host_id}: "
                               f"{len(self.active_lobbies)} lobbies active")
                return None, LobbyError.from_code('server_full')

            code = generate_unique_lobby_code(self.active_lobbies)
            lobby = GameLobby(code, host_id, max_players=self.max_players)

            error = lobby.add_player(host_id, channel)
            if error:
                return None, error

            self.active_lobbies[code] = lobby

        logger.info(f"Lobby created: {code} by {host_id}")
        return lobby, None

    def get_lobby(self, lobby_code: str) -> Optional[GameLobby]:
        """
        Get a lobby by code.

        Args:
            lobby_code: Code of the lobby

        Returns:
            The lobby or None if not found
        """
        with self._lock:
            return self.active_lobbies.get(lobby_code)

    def join_lobby(self, lobby_code: str, player_id: str,
                   channel: Any) -> Tuple[Optional[GameLobby], Optional[LobbyError]]:
        """
        Add a player to an existing lobby.

        Args:
            lobby_code: Code of the lobby to join
            player_id: Connection ID of the joining player
            channel: Channel of the joining player

        Returns:
            tuple: (lobby, error)
        """
        lobby = self.get_lobby(lobby_code)
        if not lobby:
            return None, LobbyError.from_code('lobby_not_found')

        error = lobby.add_player(player_id, channel)
        if error:
            logger.info(f"Player {player_id} could not join lobby {lobby_code}: {error.code}")
            return None, error

        logger.info(f"Player {player_id} joined lobby {lobby_code}")
        return lobby, None

    def leave_lobby(self, lobby_code: str, player_id: str) -> Tuple[Optional[GameLobby], bool]:
        """
        Remove a player from a lobby, deleting the lobby once it is empty.

        Args:
            lobby_code: Code of the player's lobby
            player_id: Connection ID of the leaving player

        Returns:
            tuple: (lobby the player was removed from, whether it was deleted)
        """
        lobby = self.get_lobby(lobby_code)
        if not lobby or not lobby.remove_player(player_id):
            return None, False

        if lobby.closed:
            self._remove_lobby(lobby)
            logger.info(f"Lobby {lobby_code} deleted (empty)")
            return lobby, True

        return lobby, False

    def get_active_lobbies(self) -> List[LobbyListItem]:
        """
        Get list of all registered lobbies.

        Returns:
            List of lobby summaries
        """
        with self._lock:
            lobbies = list(self.active_lobbies.values())
        return [lobby.summary() for lobby in lobbies]

    def lobby_count(self) -> int:
        with self._lock:
            return len(self.active_lobbies)

    def cleanup_inactive_lobbies(self, now: Optional[datetime] = None,
                                 max_idle: Optional[timedelta] = None) -> int:
        """
        Reclaim lobbies that are empty and older than the idle threshold.

        Args:
            now: Reference time, defaults to now
            max_idle: Age threshold measured from creation

        Returns:
            Number of lobbies reclaimed
        """
        now = now or datetime.now()
        max_idle = max_idle if max_idle is not None else self.max_idle

        with self._lock:
            stale = []
            for lobby_code, lobby in self.active_lobbies.items():
                with lobby.lock:
                    if lobby.is_stale(now, max_idle):
                        lobby.close()
                        stale.append(lobby_code)

            reason = LobbyError.from_code('stale_lobby')
            for lobby_code in stale:
                del self.active_lobbies[lobby_code]
                logger.info(f"Cleaned up lobby {lobby_code}: {reason.message}")

        if stale:
            logger.info(f"Cleaned up {len(stale)} inactive lobbies")
        return len(stale)

    def _remove_lobby(self, lobby: GameLobby) -> None:
        """Unregister ``lobby`` if its code still maps to this very lobby."""
        with self._lock:
            if self.active_lobbies.get(lobby.code) is lobby:
                del self.active_lobbies[lobby.code]
