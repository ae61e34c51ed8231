"""
Connection Manager for duel lobbies.

Handles player connections, disconnections, and session tracking.
Contains no lobby logic - purely connection and session management.
"""

import logging
import threading
from typing import Dict, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)

@dataclass
class PlayerSession:
    """Information about a live connection."""
    socket_id: str
    channel: Any
    lobby_code: Optional[str] = None
    connection_time: datetime = field(default_factory=datetime.now)
    last_seen: datetime = field(default_factory=datetime.now)

class ConnectionManager:
    """
    Tracks live connections and the lobby each one belongs to.

    The lobby code stored per connection is only a back-reference; lobbies
    themselves are owned by the LobbyManager.
    """

    def __init__(self):
        """Initialize connection manager."""
        self.sessions: Dict[str, PlayerSession] = {}  # socket_id -> PlayerSession
        self._lock = threading.Lock()
        logger.debug("Connection manager initialized")

    def register_connection(self, socket_id: str, channel: Any) -> PlayerSession:
        """
        Register a new connection.

        Args:
            socket_id: Unique socket connection ID
            channel: Channel used to reach the connection

        Returns:
            The new session
        """
        session = PlayerSession(socket_id=socket_id, channel=channel)
        with self._lock:
            self.sessions[socket_id] = session

        logger.info(f"Registered connection: {socket_id}")
        return session

    def unregister_connection(self, socket_id: str) -> Optional[PlayerSession]:
        """
        Unregister a connection.

        Args:
            socket_id: Socket connection ID to unregister

        Returns:
            The removed session, or None if it was not registered
        """
        with self._lock:
            session = self.sessions.pop(socket_id, None)

        if session:
            logger.info(f"Unregistered connection: {socket_id}")
        return session

    def update_activity(self, socket_id: str) -> bool:
        """
        Refresh the last-seen time of a connection.

        Args:
            socket_id: Socket connection ID

        Returns:
            True if updated successfully, False otherwise
        """
        with self._lock:
            session = self.sessions.get(socket_id)
            if not session:
                return False
            session.last_seen = datetime.now()
            return True

    def associate_with_lobby(self, socket_id: str, lobby_code: str) -> bool:
        """
        Associate a connection with a lobby.

        Args:
            socket_id: Socket connection ID
            lobby_code: Lobby code to associate with

        Returns:
            True if associated successfully, False otherwise
        """
        with self._lock:
            session = self.sessions.get(socket_id)
            if not session:
                return False
            session.lobby_code = lobby_code

        logger.debug(f"Associated {socket_id} with lobby {lobby_code}")
        return True

    def disassociate_from_lobby(self, socket_id: str) -> Optional[str]:
        """
        Disassociate a connection from its lobby.

        Args:
            socket_id: Socket connection ID

        Returns:
            Previous lobby code, or None if not associated
        """
        with self._lock:
            session = self.sessions.get(socket_id)
            if not session:
                return None
            previous_lobby = session.lobby_code
            session.lobby_code = None

        logger.debug(f"Disassociated {socket_id} from lobby {previous_lobby}")
        return previous_lobby

    def get_session_by_socket(self, socket_id: str) -> Optional[PlayerSession]:
        """
        Get session by socket ID.

        Args:
            socket_id: Socket connection ID

        Returns:
            PlayerSession or None if not found
        """
        with self._lock:
            return self.sessions.get(socket_id)

    def get_lobby_by_socket(self, socket_id: str) -> Optional[str]:
        """
        Get lobby code by socket ID.

        Args:
            socket_id: Socket connection ID

        Returns:
            Lobby code or None if not in a lobby
        """
        with self._lock:
            session = self.sessions.get(socket_id)
            return session.lobby_code if session else None

    def connection_count(self) -> int:
        """Number of live connections."""
        with self._lock:
            return len(self.sessions)
