"""
API Route Handlers for the duel relay server.

Read-only queries against the lobby and connection registries.
"""

import logging
from flask import jsonify

logger = logging.getLogger(__name__)

def register_api_handlers(app, lobby_manager, connection_manager):
    """
    Register all API route handlers.

    Args:
        app: Flask application instance
        lobby_manager: Lobby registry
        connection_manager: Connection registry
    """

    @app.route('/api/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'message': 'Duel relay server is running',
            'version': '1.0.0'
        })

    @app.route('/api/stats')
    def get_stats():
        """Server-wide counters and a summary of every lobby."""
        lobbies = lobby_manager.get_active_lobbies()
        return jsonify({
            'connectedPlayers': connection_manager.connection_count(),
            'activeLobbies': len(lobbies),
            'lobbies': [lobby.to_dict() for lobby in lobbies]
        })

    @app.route('/api/lobby/<code>')
    def get_lobby(code):
        """Current view of one lobby."""
        lobby = lobby_manager.get_lobby(code)
        if not lobby:
            return jsonify({'error': 'Lobby not found'}), 404
        return jsonify(lobby.snapshot())

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    logger.info("API handlers registered successfully")
