import os
from dotenv import load_dotenv

# Only load the .env file if we're not on Render (i.e., we are in a local environment)
if os.environ.get("RENDER") != "true":
    load_dotenv()

# Flask Configuration
SECRET_KEY = os.getenv('SECRET_KEY', 'a_very_secret_key_that_should_be_changed')
CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

# Socket.IO Configuration
SOCKETIO_ASYNC_MODE = os.getenv('SOCKETIO_ASYNC_MODE', 'eventlet')
SOCKETIO_PING_TIMEOUT = int(os.getenv('SOCKETIO_PING_TIMEOUT', 60))
SOCKETIO_PING_INTERVAL = int(os.getenv('SOCKETIO_PING_INTERVAL', 25))

# Lobby Configuration
MAX_PLAYERS_PER_LOBBY = int(os.getenv('MAX_PLAYERS_PER_LOBBY', 2))
MAX_LOBBIES = int(os.getenv('MAX_LOBBIES', 9000))

# Timers (seconds)
GAME_RESET_DELAY_SEC = float(os.getenv('GAME_RESET_DELAY_SEC', 5))
# 0 disables the background sweep
LOBBY_CLEANUP_INTERVAL_SEC = float(os.getenv('LOBBY_CLEANUP_INTERVAL_SEC', 300))
LOBBY_MAX_IDLE_SEC = float(os.getenv('LOBBY_MAX_IDLE_SEC', 3600))

# Server Configuration
PORT = int(os.getenv('PORT', 3000))
DEBUG = os.environ.get('RENDER', '') != 'true'

