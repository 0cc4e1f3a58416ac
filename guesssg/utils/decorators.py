"""
Player Token Decorators

Contains decorators that resolve the player behind an HTTP request.
"""

from functools import wraps
from flask import request, jsonify

from .helpers import get_bearer_token


def require_player(f):
    """
    Decorator to require a valid player token for protected HTTP endpoints.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.player_service import get_player_service

        player_service = get_player_service()
        if not player_service:
            return jsonify({
                'success': False,
                'error': 'Player service unavailable'
            }), 500

        token = get_bearer_token()
        if not token:
            return jsonify({
                'success': False,
                'error': 'Authorization token required'
            }), 401

        result = player_service.verify_token(token)
        if not result['success']:
            return jsonify({
                'success': False,
                'error': result['error']
            }), 500 if result.get('database_error') else 401

        # Add player data to request context
        request.player = result['player']
        return f(*args, **kwargs)

    return decorated_function


def optional_player(f):
    """
    Decorator that attaches the player when a valid token is sent and plays
    as guest otherwise. A token that fails verification is rejected rather
    than silently downgraded to a guest.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.player_service import get_player_service

        request.player = None
        token = get_bearer_token()
        if token:
            player_service = get_player_service()
            if not player_service:
                return jsonify({
                    'success': False,
                    'error': 'Player service unavailable'
                }), 500

            result = player_service.verify_token(token)
            if not result['success']:
                return jsonify({
                    'success': False,
                    'error': result['error']
                }), 500 if result.get('database_error') else 401
            request.player = result['player']

        return f(*args, **kwargs)

    return decorated_function
