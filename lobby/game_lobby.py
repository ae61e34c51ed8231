"""
Two-player lobby state machine.

A GameLobby owns its members, their readiness, the host identity and the
match state. Every mutation happens under the lobby's own lock so that
events for the same lobby are applied one at a time, while unrelated
lobbies never contend with each other.
"""

import copy
import logging
import threading
from typing import Optional, List, Dict, Set, Any
from datetime import datetime, timedelta
from .models import MatchState, LobbyError, PlayerData, LobbyListItem
from utils.constants import GAME_CONFIG

logger = logging.getLogger(__name__)

class GameLobby:
    """
    A match session grouping up to ``max_players`` connections.

    Members are kept in join order, which is also the order used to pick a
    new host when the current one leaves.
    """

    def __init__(self, code: str, host_id: str,
                 max_players: int = GAME_CONFIG['MAX_PLAYERS'],
                 created_at: Optional[datetime] = None):
        """
        Initialize a lobby.

        Args:
            code: Registry code of the lobby
            host_id: Connection ID of the creator
            max_players: Member capacity
            created_at: Creation time, defaults to now
        """
        self.code = code
        self.host_id = host_id
        self.max_players = max_players
        self.created_at = created_at or datetime.now()
        self.state = MatchState.WAITING
        self.players: Dict[str, PlayerData] = {}  # player_id -> PlayerData, join order
        self.ready_players: Set[str] = set()
        self.game_data: Dict[str, Any] = {
            'timer': GAME_CONFIG['ROUND_TIMER'],
            'scores': {host_id: 0}
        }
        self.closed = False
        # Under eventlet without monkey patching this lock does not exclude
        # greenthreads of the same OS thread. Code holding it must not yield:
        # no socketio.sleep and no blocking I/O inside a locked section.
        self.lock = threading.RLock()
        self._round = 0

    @property
    def player_count(self) -> int:
        """Number of current members."""
        return len(self.players)

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def round_token(self) -> int:
        """Token of the most recent finish/close, used to expire scheduled resets."""
        return self._round

    def is_member(self, player_id: str) -> bool:
        return player_id in self.players

    def player_ids(self) -> List[str]:
        """Member IDs in join order."""
        with self.lock:
            return list(self.players.keys())

    def add_player(self, player_id: str, channel: Any) -> Optional[LobbyError]:
        """
        Add a member to the lobby.

        Args:
            player_id: Connection ID of the new member
            channel: Channel used to deliver messages to the member

        Returns:
            None on success, LobbyError otherwise
        """
        with self.lock:
            if self.closed:
                return LobbyError.from_code('lobby_not_found')

            if player_id in self.players:
                return None

            if len(self.players) >= self.max_players:
                return LobbyError.from_code('lobby_full')

            # An empty lobby always hands host to whoever enters first
            if not self.players and player_id != self.host_id:
                self.host_id = player_id

            self.players[player_id] = PlayerData(
                player_id=player_id,
                channel=channel,
                is_host=player_id == self.host_id
            )

            if len(self.players) == 1:
                self.game_data['scores'][player_id] = 0

            logger.info(f"Player {player_id} added to lobby {self.code} "
                        f"({len(self.players)}/{self.max_players})")
            return None

    def remove_player(self, player_id: str) -> bool:
        """
        Remove a member from the lobby.

        Removing an unknown member is a no-op. When the host leaves, the
        oldest remaining member becomes host. When the last member leaves,
        the lobby is closed and can no longer be joined.

        Returns:
            True if the member was removed
        """
        with self.lock:
            player = self.players.pop(player_id, None)
            if player is None:
                return False

            self.ready_players.discard(player_id)

            if player_id == self.host_id and self.players:
                new_host_id = next(iter(self.players))
                self.host_id = new_host_id
                self.players[new_host_id].is_host = True
                logger.info(f"Host of lobby {self.code} passed to {new_host_id}")

            if not self.players:
                self._close()
            elif self.state == MatchState.FIGHTING:
                # The match cannot go on short-handed; the next pair readies up again
                self.state = MatchState.WAITING
                self._clear_readiness()
                logger.info(f"Match in lobby {self.code} abandoned, back to waiting")

            logger.info(f"Player {player_id} removed from lobby {self.code}")
            return True

    def set_ready(self, player_id: str, ready: bool) -> None:
        """Set a member's ready flag. Unknown members are ignored."""
        with self.lock:
            player = self.players.get(player_id)
            if not player:
                return

            player.ready = ready
            if ready:
                self.ready_players.add(player_id)
            else:
                self.ready_players.discard(player_id)

    def can_start(self) -> bool:
        """True iff every slot is filled and every member is ready."""
        with self.lock:
            return (len(self.players) == self.max_players and
                    len(self.ready_players) == self.max_players)

    def ready_up(self, player_id: str, ready: bool) -> bool:
        """
        Apply a readiness change and start the match if possible.

        Returns:
            True if this call moved the lobby from waiting to fighting
        """
        with self.lock:
            if player_id not in self.players:
                return False

            self.set_ready(player_id, ready)

            if self.state == MatchState.WAITING and self.can_start():
                self.state = MatchState.FIGHTING
                logger.info(f"Game starting in lobby {self.code}")
                return True

            return False

    def finish_match(self) -> Optional[int]:
        """
        Move a running match to finished.

        Returns:
            Round token for the scheduled reset, or None if no match was running
        """
        with self.lock:
            if self.state != MatchState.FIGHTING:
                return None

            self.state = MatchState.FINISHED
            self._round += 1
            logger.info(f"Game finished in lobby {self.code}")
            return self._round

    def reset_after_match(self, token: int) -> bool:
        """
        Return a finished lobby to waiting and clear readiness.

        Does nothing if the lobby was closed, emptied, or finished again
        since ``token`` was issued.

        Returns:
            True if the lobby was reset
        """
        with self.lock:
            if (self.closed or not self.players or
                    self.state != MatchState.FINISHED or token != self._round):
                return False

            self.state = MatchState.WAITING
            self._clear_readiness()

            logger.info(f"Lobby {self.code} back to waiting")
            return True

    def _clear_readiness(self) -> None:
        self.ready_players.clear()
        for player in self.players.values():
            player.ready = False

    def relay(self, sender_id: str, event: str, payload: Dict[str, Any],
              health: Any = None) -> bool:
        """
        Relay gameplay data from one member to the others.

        Only relays while a match is running. ``health``, when given, is
        recorded for the sender.

        Returns:
            True if the payload was relayed
        """
        with self.lock:
            if self.state != MatchState.FIGHTING or sender_id not in self.players:
                return False

            if health is not None:
                self.game_data.setdefault('playerHealth', {})[sender_id] = health

            self.broadcast(event, payload, exclude_id=sender_id)
            return True

    def broadcast(self, event: str, data: Any = None,
                  exclude_id: Optional[str] = None) -> None:
        """
        Deliver an event to every member except ``exclude_id``.

        Members whose channel is known to be disconnected are skipped.
        """
        with self.lock:
            for player_id, player in self.players.items():
                if player_id == exclude_id or not player.is_connected:
                    continue
                try:
                    player.channel.emit(event, data)
                except Exception as e:
                    logger.error(f"Failed to deliver {event} to {player_id} "
                                 f"in lobby {self.code}: {e}")

    def close(self) -> None:
        """Close the lobby so it can no longer be joined or reset."""
        with self.lock:
            self._close()

    def _close(self) -> None:
        self.closed = True
        self._round += 1

    def is_stale(self, now: datetime, max_idle: timedelta) -> bool:
        """Empty and created longer than ``max_idle`` ago."""
        with self.lock:
            return not self.players and now - self.created_at > max_idle

    def get_game_data(self) -> Dict[str, Any]:
        """Copy of the per-match scratch data."""
        with self.lock:
            return copy.deepcopy(self.game_data)

    def snapshot(self) -> Dict[str, Any]:
        """Read-only view of the lobby for clients and API queries."""
        with self.lock:
            return {
                'code': self.code,
                'playerCount': len(self.players),
                'maxPlayers': self.max_players,
                'players': [p.to_dict() for p in self.players.values()],
                'gameState': self.state.value,
                'canStart': self.can_start()
            }

    def summary(self) -> LobbyListItem:
        """Lightweight summary for lobby listings."""
        with self.lock:
            return LobbyListItem(
                code=self.code,
                player_count=len(self.players),
                game_state=self.state,
                created_at=self.created_at
            )
