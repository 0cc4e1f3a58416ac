"""
GuessSG Game Server Application Package

Daily Singapore-themed word guessing game: a pure round engine wrapped in
services for words, players, the leaderboard and the Merlion AI companion,
exposed over Flask HTTP endpoints and Flask-SocketIO events.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def initialize_services(config_class=Config):
    """
    Initialize every global service from a configuration class.

    The player service needs MongoDB and a token secret; without them the
    server still runs and everyone plays as a guest.

    Returns:
        Dict of service name to service instance (None where unavailable)
    """
    from .services.ai_service import initialize_ai_service
    from .services.game_service import initialize_game_service
    from .services.leaderboard_service import initialize_leaderboard_service
    from .services.player_service import initialize_player_service, set_player_service
    from .services.word_service import initialize_word_service

    word_service = initialize_word_service()

    if config_class.MONGO_URI and config_class.JWT_SECRET:
        player_service = initialize_player_service(
            config_class.MONGO_URI,
            config_class.MONGO_DB_NAME,
            config_class.JWT_SECRET,
            config_class.JWT_EXPIRATION_DAYS
        )
    else:
        player_service = set_player_service(None)

    ai_service = initialize_ai_service(
        config_class.PERPLEXITY_API_KEY,
        config_class.PERPLEXITY_MODEL,
        config_class.AI_TIMEOUT_SECONDS
    )
    game_service = initialize_game_service(
        max_attempts=config_class.MAX_ATTEMPTS,
        game_ttl_seconds=config_class.GAME_TTL_SECONDS
    )
    leaderboard_service = initialize_leaderboard_service()

    return {
        'word': word_service,
        'player': player_service,
        'ai': ai_service,
        'game': game_service,
        'leaderboard': leaderboard_service
    }


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.ai_controller import ai_bp
    from .controllers.game_controller import game_bp
    from .controllers.leaderboard_controller import leaderboard_bp
    from .controllers.player_controller import player_bp

    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(player_bp, url_prefix='/api/players')
    app.register_blueprint(leaderboard_bp, url_prefix='/api')
    app.register_blueprint(ai_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
