"""
Socket.IO Event Handlers for the duel relay server.

Translates inbound events into lobby and registry operations and emits the
resulting replies and broadcasts. Lobby-scoped events from a connection that
is not in a lobby are ignored rather than answered with an error.
"""

import logging
from typing import Optional, Dict, Any
from flask import request
from flask_socketio import emit
from lobby import GameLobby, LobbyError
from utils.constants import CLIENT_EVENTS, SERVER_EVENTS, GAME_CONFIG
from utils.helpers import server_timestamp
from .channel import SocketChannel
from .messages import parse_message

logger = logging.getLogger(__name__)

def register_socket_handlers(socketio, lobby_manager, connection_manager,
                             config: Optional[Dict[str, Any]] = None):
    """
    Register all Socket.IO event handlers.

    Args:
        socketio: SocketIO instance
        lobby_manager: Lobby registry
        connection_manager: Connection registry
        config: Mapping holding GAME_RESET_DELAY_SEC
    """
    config = config or {}
    reset_delay = config.get('GAME_RESET_DELAY_SEC', GAME_CONFIG['GAME_RESET_DELAY'])

    def _current_lobby(sid: str) -> Optional[GameLobby]:
        """Lobby the connection is a member of, if any."""
        lobby_code = connection_manager.get_lobby_by_socket(sid)
        lobby = lobby_manager.get_lobby(lobby_code) if lobby_code else None
        if not lobby or not lobby.is_member(sid):
            logger.debug(f"Ignoring event from {sid}: "
                         f"{LobbyError.from_code('not_in_lobby').message}")
            return None
        return lobby

    def _leave_lobby(sid: str, lobby_code: str) -> None:
        """Remove the connection from a lobby and tell whoever is left."""
        lobby, deleted = lobby_manager.leave_lobby(lobby_code, sid)
        if lobby is None or deleted:
            return

        with lobby.lock:
            lobby.broadcast(SERVER_EVENTS['PLAYER_DISCONNECTED'], {
                'connId': sid,
                'lobbyView': lobby.snapshot()
            })

    def _leave_current_lobby(sid: str) -> Optional[str]:
        lobby_code = connection_manager.disassociate_from_lobby(sid)
        if lobby_code:
            _leave_lobby(sid, lobby_code)
        return lobby_code

    def _emit_error(error: LobbyError) -> None:
        emit(SERVER_EVENTS['LOBBY_ERROR'], error.to_dict())

    def _reset_lobby_later(lobby: GameLobby, token: int) -> None:
        """Background task: return a finished lobby to waiting after the delay."""
        socketio.sleep(reset_delay)
        try:
            # A lobby deleted meanwhile must not be resurrected, even if its
            # code has been reused by a new lobby
            if lobby_manager.get_lobby(lobby.code) is not lobby:
                return

            with lobby.lock:
                if lobby.reset_after_match(token):
                    lobby.broadcast(SERVER_EVENTS['LOBBY_UPDATED'], lobby.snapshot())

        except Exception as e:
            logger.error(f"Error resetting lobby {lobby.code}: {e}")

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Handle client connection."""
        sid = request.sid
        channel = SocketChannel(socketio, sid, namespace=request.namespace)
        connection_manager.register_connection(sid, channel)
        logger.info(f"Player connected: {sid}")
        emit(SERVER_EVENTS['CONNECTED'], {'id': sid})

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Handle client disconnection."""
        sid = request.sid
        logger.info(f"Player disconnected: {sid}")

        try:
            session = connection_manager.get_session_by_socket(sid)
            if session:
                session.channel.connected = False
            _leave_current_lobby(sid)

        except Exception as e:
            logger.error(f"Error handling disconnect: {e}")

        finally:
            connection_manager.unregister_connection(sid)

    @socketio.on(CLIENT_EVENTS['CREATE_LOBBY'])
    def handle_create_lobby(data=None):
        """Handle lobby creation request."""
        sid = request.sid
        try:
            session = connection_manager.get_session_by_socket(sid)
            if not session:
                return

            lobby, error = lobby_manager.create_lobby(sid, session.channel)
            if error:
                _emit_error(error)
                return

            previous_code = connection_manager.get_lobby_by_socket(sid)
            if previous_code:
                _leave_lobby(sid, previous_code)
            connection_manager.associate_with_lobby(sid, lobby.code)

            emit(SERVER_EVENTS['LOBBY_CREATED'], {
                'code': lobby.code,
                'isHost': True,
                'lobbyView': lobby.snapshot()
            })

        except Exception as e:
            logger.error(f"Error creating lobby: {e}")

    @socketio.on(CLIENT_EVENTS['JOIN_LOBBY'])
    def handle_join_lobby(data=None):
        """Handle player joining a lobby."""
        sid = request.sid
        try:
            message = parse_message(CLIENT_EVENTS['JOIN_LOBBY'], data)
            if not message:
                _emit_error(LobbyError.from_code('invalid_message'))
                return

            session = connection_manager.get_session_by_socket(sid)
            if not session:
                return

            lobby, error = lobby_manager.join_lobby(message.code, sid, session.channel)
            if error:
                _emit_error(error)
                return

            previous_code = connection_manager.get_lobby_by_socket(sid)
            if previous_code and previous_code != lobby.code:
                _leave_lobby(sid, previous_code)
            connection_manager.associate_with_lobby(sid, lobby.code)

            with lobby.lock:
                lobby_view = lobby.snapshot()
                emit(SERVER_EVENTS['LOBBY_JOINED'], {
                    'code': lobby.code,
                    'isHost': lobby.host_id == sid,
                    'lobbyView': lobby_view
                })
                lobby.broadcast(SERVER_EVENTS['LOBBY_UPDATED'], lobby_view, exclude_id=sid)

        except Exception as e:
            logger.error(f"Error joining lobby: {e}")

    @socketio.on(CLIENT_EVENTS['LEAVE_LOBBY'])
    def handle_leave_lobby(data=None):
        """Handle player leaving a lobby without disconnecting."""
        sid = request.sid
        try:
            lobby_code = _leave_current_lobby(sid)
            if lobby_code:
                emit(SERVER_EVENTS['LOBBY_LEFT'], {'code': lobby_code})

        except Exception as e:
            logger.error(f"Error leaving lobby: {e}")

    @socketio.on(CLIENT_EVENTS['PLAYER_READY'])
    def handle_player_ready(data=None):
        """Handle ready/unready and start the match once everyone is ready."""
        sid = request.sid
        try:
            message = parse_message(CLIENT_EVENTS['PLAYER_READY'], data)
            if not message:
                logger.warning(f"Ignoring malformed player_ready from {sid}")
                return

            lobby = _current_lobby(sid)
            if not lobby:
                return

            with lobby.lock:
                started = lobby.ready_up(sid, message.ready)
                lobby.broadcast(SERVER_EVENTS['LOBBY_UPDATED'], lobby.snapshot())

                if started:
                    lobby.broadcast(SERVER_EVENTS['GAME_START'], {
                        'memberIds': lobby.player_ids(),
                        'gameData': lobby.get_game_data()
                    })

        except Exception as e:
            logger.error(f"Error handling player_ready: {e}")

    @socketio.on(CLIENT_EVENTS['GAME_INPUT'])
    def handle_game_input(data=None):
        """Relay gameplay input to the opponent."""
        sid = request.sid
        try:
            message = parse_message(CLIENT_EVENTS['GAME_INPUT'], data)
            if not message:
                return

            lobby = _current_lobby(sid)
            if not lobby:
                return

            lobby.relay(sid, SERVER_EVENTS['GAME_INPUT'], {
                **message.payload,
                'senderId': sid,
                'serverTimestamp': server_timestamp()
            })

        except Exception as e:
            logger.error(f"Error relaying game_input: {e}")

    @socketio.on(CLIENT_EVENTS['GAME_UPDATE'])
    def handle_game_update(data=None):
        """Relay gameplay state to the opponent, recording reported health."""
        sid = request.sid
        try:
            message = parse_message(CLIENT_EVENTS['GAME_UPDATE'], data)
            if not message:
                return

            lobby = _current_lobby(sid)
            if not lobby:
                return

            lobby.relay(sid, SERVER_EVENTS['GAME_UPDATE'], {
                **message.payload,
                'senderId': sid,
                'serverTimestamp': server_timestamp()
            }, health=message.health)

        except Exception as e:
            logger.error(f"Error relaying game_update: {e}")

    @socketio.on(CLIENT_EVENTS['GAME_OVER'])
    def handle_game_over(data=None):
        """Handle a match-end report."""
        sid = request.sid
        try:
            message = parse_message(CLIENT_EVENTS['GAME_OVER'], data)
            if not message:
                return

            lobby = _current_lobby(sid)
            if not lobby:
                return

            with lobby.lock:
                token = lobby.finish_match()
                if token is None:
                    logger.debug(f"Ignoring game_over from {sid}: lobby {lobby.code} not fighting")
                    return

                lobby.broadcast(SERVER_EVENTS['GAME_OVER'], {
                    'winner': message.winner,
                    'stats': message.stats,
                    'serverTimestamp': server_timestamp()
                })

            socketio.start_background_task(_reset_lobby_later, lobby, token)

        except Exception as e:
            logger.error(f"Error handling game_over: {e}")

    @socketio.on(CLIENT_EVENTS['PING'])
    def handle_ping(data=None):
        """Heartbeat."""
        emit(SERVER_EVENTS['PONG'])
        connection_manager.update_activity(request.sid)

    logger.info("Socket.IO handlers registered successfully")
