"""
Socket.IO delivery channel.

Wraps the ability to send events to one connected socket so that lobbies
can message their members without knowing about the transport.
"""

import logging

logger = logging.getLogger(__name__)

class SocketChannel:
    """Delivers events to a single Socket.IO session."""

    def __init__(self, socketio, sid: str, namespace: str = '/'):
        self.socketio = socketio
        self.sid = sid
        self.namespace = namespace
        self.connected = True

    def emit(self, event: str, data=None) -> None:
        """Send ``event`` to this session. Fire-and-forget."""
        if not self.connected:
            logger.debug(f"Dropping {event} for disconnected {self.sid}")
            return
        if data is None:
            self.socketio.emit(event, to=self.sid, namespace=self.namespace)
        else:
            self.socketio.emit(event, data, to=self.sid, namespace=self.namespace)

    def __repr__(self) -> str:
        return f"SocketChannel({self.sid!r}, connected={self.connected})"
