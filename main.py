"""
GuessSG Game Server - Main Entry Point

This is the main entry point for the GuessSG game server.
It initializes all services and starts the Flask-SocketIO application.
"""

import argparse

from guesssg import create_app, initialize_services
from guesssg.config import config, validate_word_bank_integrity
from guesssg.utils.game_logger import game_logger


def parse_args():
    parser = argparse.ArgumentParser(description="Run the GuessSG game server")
    parser.add_argument('--env', choices=sorted(config.keys()), default='default',
                        help="Configuration profile to run with")
    return parser.parse_args()


def main():
    """Main function to initialize services and start the server."""
    args = parse_args()
    config_class = config[args.env]

    try:
        print("Initializing services...")

        validate_word_bank_integrity()
        services = initialize_services(config_class)

        if services['player']:
            print("✓ Player service initialized successfully")
        elif config_class.MONGO_URI and config_class.JWT_SECRET:
            print("✗ Failed to initialize player service - playing as guest only")
        else:
            print("✗ MongoDB URI or JWT Secret not configured - playing as guest only")

        if services['ai'].is_configured():
            print("✓ AI companion configured")
        else:
            print("✗ PERPLEXITY_API_KEY not configured - Merlion will stay quiet")

        print("✓ Game service initialized successfully")

        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        game_logger.logger.info("GuessSG Server Starting")

        print(f"\nStarting GuessSG Game Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Profiles available: {services['player'] is not None}")
        print("=" * 50)

        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("GuessSG Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
