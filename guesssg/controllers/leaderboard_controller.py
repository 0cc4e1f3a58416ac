"""
Leaderboard Controller

Handles leaderboard HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..services.leaderboard_service import DEFAULT_LIMIT, get_leaderboard_service
from ..utils.game_logger import game_logger

leaderboard_bp = Blueprint('leaderboard', __name__)


@leaderboard_bp.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    """Ranked players, sorted by wins, win rate or games played."""
    try:
        leaderboard_service = get_leaderboard_service()
        if not leaderboard_service:
            return jsonify({
                'success': False,
                'error': 'Leaderboard service unavailable'
            }), 500

        sort_by = request.args.get('sort', 'wins')
        limit = request.args.get('limit', DEFAULT_LIMIT, type=int)

        game_logger.log_user_action(request, 'get_leaderboard', sort_by=sort_by, limit=limit)

        result = leaderboard_service.get_leaderboard(sort_by, max(1, min(limit, DEFAULT_LIMIT)))
        status = 200 if result['success'] else 500

        game_logger.log_server_response(
            request, 'get_leaderboard', result['success'],
            {'success': result['success'], 'entries': len(result.get('entries', []))}
        )
        return jsonify(result), status

    except ValueError as e:
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'get_leaderboard', False, error_response)
        return jsonify(error_response), 400
    except Exception as e:
        game_logger.log_error(request, e, 'get_leaderboard')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'get_leaderboard', False, error_response)
        return jsonify(error_response), 500
