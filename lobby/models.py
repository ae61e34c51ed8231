"""
Data models for lobby management.

These are pure data structures used to pass information between
the lobby state machine, the lobby registry, and handlers.
"""

from dataclasses import dataclass
from typing import Dict, Any
from datetime import datetime
from enum import Enum
from utils.constants import MATCH_STATES, LOBBY_ERRORS

class MatchState(Enum):
    """Match state enumeration."""
    WAITING = MATCH_STATES['WAITING']
    FIGHTING = MATCH_STATES['FIGHTING']
    FINISHED = MATCH_STATES['FINISHED']

@dataclass
class LobbyError:
    """Error result from a lobby operation."""
    code: str
    message: str

    @classmethod
    def from_code(cls, code: str) -> 'LobbyError':
        """Build an error from one of the known error codes."""
        return cls(code=code, message=LOBBY_ERRORS.get(code, code))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the lobby_error payload."""
        return {
            'reason': self.code,
            'error': self.message
        }

@dataclass
class PlayerData:
    """Represents a member of a lobby."""
    player_id: str
    channel: Any
    is_host: bool = False
    ready: bool = False

    @property
    def is_connected(self) -> bool:
        """Whether the member's channel can still receive messages."""
        return bool(getattr(self.channel, 'connected', True))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.player_id,
            'isHost': self.is_host,
            'ready': self.ready,
            'connected': self.is_connected
        }

@dataclass
class LobbyListItem:
    """Lightweight lobby info for listing active lobbies."""
    code: str
    player_count: int
    game_state: MatchState
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'code': self.code,
            'playerCount': self.player_count,
            'gameState': self.game_state.value,
            'createdAt': self.created_at.isoformat()
        }
