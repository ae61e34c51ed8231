"""
Duel Relay - Two-Player Matchmaking and Relay Server

Flask-SocketIO backend that pairs two players in a short-lived lobby,
tracks readiness, drives the match lifecycle and relays gameplay messages
between the two players without interpreting them.
"""

import logging
from flask import Flask
from flask_socketio import SocketIO
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from config import settings
from lobby import LobbyManager, ConnectionManager
from handlers import register_socket_handlers, register_api_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'SECRET_KEY': settings.SECRET_KEY,
    'CORS_ORIGINS': settings.CORS_ORIGINS,
    'SOCKETIO_ASYNC_MODE': settings.SOCKETIO_ASYNC_MODE,
    'SOCKETIO_PING_TIMEOUT': settings.SOCKETIO_PING_TIMEOUT,
    'SOCKETIO_PING_INTERVAL': settings.SOCKETIO_PING_INTERVAL,
    'MAX_PLAYERS_PER_LOBBY': settings.MAX_PLAYERS_PER_LOBBY,
    'MAX_LOBBIES': settings.MAX_LOBBIES,
    'GAME_RESET_DELAY_SEC': settings.GAME_RESET_DELAY_SEC,
    'LOBBY_CLEANUP_INTERVAL_SEC': settings.LOBBY_CLEANUP_INTERVAL_SEC,
    'LOBBY_MAX_IDLE_SEC': settings.LOBBY_MAX_IDLE_SEC,
}

def _lobby_cleanup_worker(socketio, lobby_manager, interval):
    """Periodically reclaim empty lobbies older than the idle threshold."""
    while True:
        socketio.sleep(interval)
        try:
            lobby_manager.cleanup_inactive_lobbies()
        except Exception as e:
            logger.error(f"Error during lobby cleanup: {e}")

def create_app(**overrides):
    """
    Application factory that creates and configures the Flask app.

    Args:
        **overrides: Config values replacing the environment defaults

    Returns:
        tuple: (app, socketio)
    """

    # Flask configuration
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.update(overrides)

    cors_origins = app.config['CORS_ORIGINS']
    if isinstance(cors_origins, str):
        cors_origins = cors_origins.split(',')

    # CORS configuration for browser clients
    CORS(app, origins=cors_origins)

    # ProxyFix for deployment behind reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    # SocketIO configuration
    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config['SOCKETIO_ASYNC_MODE'],
        ping_timeout=app.config['SOCKETIO_PING_TIMEOUT'],
        ping_interval=app.config['SOCKETIO_PING_INTERVAL']
    )

    # Registries live for the lifetime of the process
    connection_manager = ConnectionManager()
    lobby_manager = LobbyManager(
        max_players=app.config['MAX_PLAYERS_PER_LOBBY'],
        max_lobbies=app.config['MAX_LOBBIES'],
        max_idle_seconds=app.config['LOBBY_MAX_IDLE_SEC']
    )
    app.extensions['lobby_manager'] = lobby_manager
    app.extensions['connection_manager'] = connection_manager

    # Register handlers
    register_socket_handlers(socketio, lobby_manager, connection_manager, app.config)
    register_api_handlers(app, lobby_manager, connection_manager)

    cleanup_interval = app.config['LOBBY_CLEANUP_INTERVAL_SEC']
    if cleanup_interval > 0:
        socketio.start_background_task(
            _lobby_cleanup_worker, socketio, lobby_manager, cleanup_interval
        )

    logger.info("Application initialization complete")
    return app, socketio

def main():
    """Main entry point for the server."""
    app, socketio = create_app()

    logger.info(f"Duel relay server running on port {settings.PORT}")
    logger.info(f"Stats available at http://localhost:{settings.PORT}/api/stats")
    logger.info(f"CORS origins: {settings.CORS_ORIGINS}")

    socketio.run(app, debug=settings.DEBUG, port=settings.PORT, host='0.0.0.0')

if __name__ == '__main__':
    main()
