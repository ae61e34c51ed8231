"""
Utilities module for the duel relay server.

This module contains constants and helper functions used throughout the
application.
"""

from .constants import (
    MATCH_STATES, CLIENT_EVENTS, SERVER_EVENTS, LOBBY_ERRORS, GAME_CONFIG
)
from .helpers import (
    generate_lobby_code, generate_unique_lobby_code, lobby_code_capacity,
    server_timestamp, normalize_lobby_code
)

__all__ = [
    'MATCH_STATES',
    'CLIENT_EVENTS',
    'SERVER_EVENTS',
    'LOBBY_ERRORS',
    'GAME_CONFIG',
    'generate_lobby_code',
    'generate_unique_lobby_code',
    'lobby_code_capacity',
    'server_timestamp',
    'normalize_lobby_code'
]
