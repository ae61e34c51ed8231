"""
Lobby Module for the duel relay server.

Contains the two-player lobby state machine, the lobby registry and
connection tracking.
"""

from .models import MatchState, LobbyError, PlayerData, LobbyListItem
from .game_lobby import GameLobby
from .manager import LobbyManager
from .connection_manager import ConnectionManager, PlayerSession

__all__ = [
    # Data models
    'MatchState',
    'LobbyError',
    'PlayerData',
    'LobbyListItem',
    'PlayerSession',

    # Lobby and managers
    'GameLobby',
    'LobbyManager',
    'ConnectionManager'
]
