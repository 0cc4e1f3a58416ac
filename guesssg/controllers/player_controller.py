"""
Player Controller

Handles player profile HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from pymongo.errors import PyMongoError

from ..services.player_service import get_player_service
from ..utils.decorators import require_player
from ..utils.game_logger import game_logger

player_bp = Blueprint('players', __name__)


def _player_service_or_error():
    player_service = get_player_service()
    if not player_service:
        return None, (jsonify({
            'success': False,
            'error': 'Player service unavailable'
        }), 500)
    return player_service, None


@player_bp.route('', methods=['POST'])
def create_player():
    """Create a new player profile."""
    try:
        player_service, error = _player_service_or_error()
        if error:
            return error

        data = request.get_json(silent=True)
        if not data:
            return jsonify({
                'success': False,
                'error': 'Request body is required'
            }), 400

        nickname = data.get('nickname')

        game_logger.log_user_action(request, 'create_player', nickname=nickname)

        result = player_service.create_player(nickname)

        if result['success']:
            game_logger.log_server_response(request, 'create_player', True, result)
            game_logger.log_game_event(
                None, 'player_created', request.remote_addr,
                player_id=result['player']['id'], nickname=result['player']['nickname']
            )
            return jsonify(result), 201

        game_logger.log_server_response(request, 'create_player', False, result)
        status = 409 if 'already taken' in result['error'] else 400
        return jsonify(result), status

    except Exception as e:
        game_logger.log_error(request, e, 'create_player')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'create_player', False, error_response)
        return jsonify(error_response), 500


@player_bp.route('/login', methods=['POST'])
def login():
    """Continue as a returning player and return a player token."""
    try:
        player_service, error = _player_service_or_error()
        if error:
            return error

        data = request.get_json(silent=True)
        if not data:
            return jsonify({
                'success': False,
                'error': 'Request body is required'
            }), 400

        nickname = data.get('nickname')

        game_logger.log_user_action(request, 'login', nickname=nickname)

        result = player_service.login_player(nickname)

        if result['success']:
            game_logger.log_server_response(request, 'login', True, {
                'success': True,
                'player': result['player']  # Don't log the token
            })
            return jsonify(result)

        game_logger.log_server_response(request, 'login', False, result)
        return jsonify(result), 404

    except Exception as e:
        game_logger.log_error(request, e, 'login')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'login', False, error_response)
        return jsonify(error_response), 500


@player_bp.route('/me', methods=['GET'])
@require_player
def current_player():
    """Verify the player token and return the profile with stored stats."""
    player_service = get_player_service()
    try:
        stats = player_service.get_player_stats(request.player['id'])
    except PyMongoError as e:
        game_logger.log_error(request, e, 'current_player')
        error_response = {
            'success': False,
            'error': f'Database error: {e}'
        }
        game_logger.log_server_response(request, 'current_player', False, error_response)
        return jsonify(error_response), 500

    response_data = {
        'success': True,
        'player': request.player,
        'stats': stats
    }
    game_logger.log_server_response(request, 'current_player', True, response_data)
    return jsonify(response_data)
