"""
Typed inbound messages.

Each client event maps to one message class. Payloads that do not match
the expected shape parse to None and are dropped by the handlers instead
of being passed through untyped.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from utils.constants import CLIENT_EVENTS
from utils.helpers import normalize_lobby_code

@dataclass
class CreateLobbyMessage:
    @classmethod
    def parse(cls, data) -> Optional['CreateLobbyMessage']:
        return cls()

@dataclass
class JoinLobbyMessage:
    code: str

    @classmethod
    def parse(cls, data) -> Optional['JoinLobbyMessage']:
        if not isinstance(data, dict):
            return None
        # Older clients send the code as lobbyId
        code = normalize_lobby_code(data.get('code', data.get('lobbyId')))
        if not code:
            return None
        return cls(code=code)

@dataclass
class LeaveLobbyMessage:
    @classmethod
    def parse(cls, data) -> Optional['LeaveLobbyMessage']:
        return cls()

@dataclass
class PlayerReadyMessage:
    ready: bool

    @classmethod
    def parse(cls, data) -> Optional['PlayerReadyMessage']:
        if not isinstance(data, dict) or not isinstance(data.get('ready'), bool):
            return None
        return cls(ready=data['ready'])

@dataclass
class GameInputMessage:
    """Opaque gameplay input, relayed verbatim."""
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def parse(cls, data) -> Optional['GameInputMessage']:
        if not isinstance(data, dict):
            return None
        return cls(payload=dict(data))

@dataclass
class GameUpdateMessage:
    """Opaque gameplay state, relayed verbatim. ``health`` is also recorded."""
    payload: Dict[str, Any] = field(default_factory=dict)
    health: Any = None

    @classmethod
    def parse(cls, data) -> Optional['GameUpdateMessage']:
        if not isinstance(data, dict):
            return None
        return cls(payload=dict(data), health=data.get('health'))

@dataclass
class GameOverMessage:
    winner: Any = None
    stats: Any = None

    @classmethod
    def parse(cls, data) -> Optional['GameOverMessage']:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            return None
        return cls(winner=data.get('winner'), stats=data.get('stats'))

@dataclass
class PingMessage:
    @classmethod
    def parse(cls, data) -> Optional['PingMessage']:
        return cls()

CLIENT_MESSAGES = {
    CLIENT_EVENTS['CREATE_LOBBY']: CreateLobbyMessage,
    CLIENT_EVENTS['JOIN_LOBBY']: JoinLobbyMessage,
    CLIENT_EVENTS['LEAVE_LOBBY']: LeaveLobbyMessage,
    CLIENT_EVENTS['PLAYER_READY']: PlayerReadyMessage,
    CLIENT_EVENTS['GAME_INPUT']: GameInputMessage,
    CLIENT_EVENTS['GAME_UPDATE']: GameUpdateMessage,
    CLIENT_EVENTS['GAME_OVER']: GameOverMessage,
    CLIENT_EVENTS['PING']: PingMessage,
}

def parse_message(event: str, data):
    """
    Parse the payload of a client event.

    Returns:
        The typed message, or None for unknown events and malformed payloads
    """
    message_class = CLIENT_MESSAGES.get(event)
    if message_class is None:
        return None
    return message_class.parse(data)
