"""
Protocol constants for the duel relay server.

This module contains the constant values shared by the lobby state machine
and the Socket.IO / HTTP handlers: event names, error codes and match
configuration.
"""

# Lobby code space: 4-digit numeric codes
LOBBY_CODE_MIN = 1000
LOBBY_CODE_MAX = 9999

# Match states
MATCH_STATES = {
    'WAITING': 'waiting',     # Players gather and ready up
    'FIGHTING': 'fighting',   # Match in progress, gameplay is relayed
    'FINISHED': 'finished'    # Match over, waiting for the reset delay
}

# Inbound (client -> server) events
CLIENT_EVENTS = {
    'CREATE_LOBBY': 'create_lobby',
    'JOIN_LOBBY': 'join_lobby',
    'LEAVE_LOBBY': 'leave_lobby',
    'PLAYER_READY': 'player_ready',
    'GAME_INPUT': 'game_input',
    'GAME_UPDATE': 'game_update',
    'GAME_OVER': 'game_over',
    'PING': 'ping'
}

# Outbound (server -> client) events
SERVER_EVENTS = {
    'CONNECTED': 'connected',
    'LOBBY_CREATED': 'lobby_created',
    'LOBBY_JOINED': 'lobby_joined',
    'LOBBY_LEFT': 'lobby_left',
    'LOBBY_UPDATED': 'lobby_updated',
    'LOBBY_ERROR': 'lobby_error',
    'GAME_START': 'game_start',
    'GAME_INPUT': 'game_input',
    'GAME_UPDATE': 'game_update',
    'GAME_OVER': 'game_over',
    'PLAYER_DISCONNECTED': 'player_disconnected',
    'PONG': 'pong'
}

# Lobby error codes and their human readable messages
LOBBY_ERRORS = {
    'lobby_full': 'Lobby is full',
    'lobby_not_found': 'Lobby not found',
    'not_in_lobby': 'Player is not in a lobby',
    'stale_lobby': 'Lobby expired',
    'invalid_message': 'Invalid message',
    'server_full': 'No lobby codes available'
}

# Match configuration
GAME_CONFIG = {
    'MAX_PLAYERS': 2,
    'ROUND_TIMER': 60,
    'GAME_RESET_DELAY': 5,        # seconds
    'LOBBY_MAX_IDLE': 3600        # seconds, measured from lobby creation
}
