"""
Handlers Module for the duel relay server.

Contains the web layer handlers (Socket.IO and API). Lobby rules live in
the lobby package; handlers translate events into lobby operations.
"""

from .socket_handlers import register_socket_handlers
from .api_handlers import register_api_handlers
from .channel import SocketChannel

__all__ = [
    'register_socket_handlers',
    'register_api_handlers',
    'SocketChannel'
]
