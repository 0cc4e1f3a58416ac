"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, request, jsonify

from ..config.game_settings import KEYBOARD_ROWS
from ..core.exceptions import (
    GameError, GameNotFound, InvalidGuess, LengthMismatch, RoundInProgress, RoundTerminated,
    UnknownCategory
)
from ..models.player import PlayerStats
from ..services.game_service import get_game_service
from ..services.player_service import get_player_service
from ..services.word_service import get_word_service
from ..utils.decorators import optional_player
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)

ERROR_STATUS = {
    GameNotFound: 404,
    RoundTerminated: 409,
    RoundInProgress: 409,
    LengthMismatch: 400,
    InvalidGuess: 400,
    UnknownCategory: 400,
}


def _status_for(error: GameError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 400


def _game_error_response(action: str, error: GameError, game_id=None):
    error_response = {
        'success': False,
        'error': str(error),
        'error_type': type(error).__name__
    }
    game_logger.log_server_response(request, action, False, error_response, game_id)
    return jsonify(error_response), _status_for(error)


def _unavailable():
    return jsonify({
        'success': False,
        'error': 'Game service unavailable'
    }), 500


def _log_round_end(game_id, state, final_guess):
    if not state.game_over:
        return
    event = 'game_won' if state.won else 'game_lost'
    game_logger.log_game_event(
        game_id, event, request.remote_addr,
        player_id=state.player_id, attempts_used=state.current_attempt,
        target_word=state.answer, final_guess=final_guess
    )


@game_bp.route('/categories', methods=['GET'])
def list_categories():
    """List word categories for the category picker."""
    word_service = get_word_service()
    if not word_service:
        return jsonify({
            'success': False,
            'error': 'Word service unavailable'
        }), 500
    return jsonify({
        'success': True,
        'categories': word_service.categories(),
        'keyboard_rows': KEYBOARD_ROWS
    })


@game_bp.route('/new_game', methods=['POST'])
@optional_player
def new_game():
    """Create a new game session."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json(silent=True) or {}
        category = data.get('category', 'all')
        daily = data.get('daily', True)
        if not isinstance(daily, bool):
            error_response = {
                'success': False,
                'error': 'daily must be true or false'
            }
            game_logger.log_server_response(request, 'new_game', False, error_response)
            return jsonify(error_response), 400
        stats = PlayerStats.from_dict(data.get('stats'))
        player_id = request.player['id'] if request.player else None

        game_logger.log_user_action(request, 'new_game', category=category, daily=daily)

        game_id = game_service.create_new_game(category, player_id=player_id, stats=stats, daily=daily)
        state = game_service.get_game_state(game_id)

        response_data = {
            'success': True,
            'game_id': game_id,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'new_game', True, response_data, game_id,
            word_length=state.word_length, max_attempts=state.max_attempts
        )

        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('new_game', e)
    except Exception as e:
        game_logger.log_error(request, e, 'new_game')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'new_game', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>/state', methods=['GET'])
def get_state(game_id):
    """Get current game state."""
    game_service = get_game_service()
    if not game_service:
        return _unavailable()

    game_logger.log_user_action(request, 'get_state', game_id)

    state = game_service.get_game_state(game_id)
    if state is None:
        return _game_error_response('get_state', GameNotFound('Game not found'), game_id)

    response_data = {
        'success': True,
        'state': asdict(state)
    }
    game_logger.log_server_response(
        request, 'get_state', True, response_data, game_id,
        current_attempt=state.current_attempt, game_over=state.game_over
    )
    return jsonify(response_data)


@game_bp.route('/game/<game_id>/guess', methods=['POST'])
def make_guess(game_id):
    """Submit a whole guess for evaluation."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json(silent=True)
        if not data or 'guess' not in data:
            error_response = {
                'success': False,
                'error': 'Guess is required'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
            return jsonify(error_response), 400

        guess = data['guess']

        game_logger.log_user_action(request, 'submit_guess', game_id, guess=guess)

        state = game_service.submit_guess(game_id, guess)

        response_data = {
            'success': True,
            'state': asdict(state)
        }
        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, game_id,
            attempt=state.current_attempt, game_over=state.game_over
        )
        _log_round_end(game_id, state, guess)

        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('submit_guess', e, game_id)
    except Exception as e:
        game_logger.log_error(request, e, 'submit_guess', game_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>/key', methods=['POST'])
def press_key(game_id):
    """Feed one keystroke; a full row or ENTER submits it."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json(silent=True)
        if not data or not data.get('key'):
            error_response = {
                'success': False,
                'error': 'Key is required'
            }
            game_logger.log_server_response(request, 'key_press', False, error_response, game_id)
            return jsonify(error_response), 400

        key = data['key']
        attempt_before = game_service.get_round(game_id).attempt
        pending_guess = game_service.get_game_state(game_id).current_guess

        state = game_service.press_key(game_id, key)

        if state.current_attempt != attempt_before:
            submitted = state.guesses[-1]
            game_logger.log_user_action(request, 'submit_guess', game_id, guess=submitted, via='key')
            _log_round_end(game_id, state, submitted)
        elif key.upper() == 'ENTER':
            game_logger.log_user_action(request, 'submit_guess', game_id, guess=pending_guess, via='key')

        return jsonify({
            'success': True,
            'state': asdict(state)
        })

    except GameError as e:
        return _game_error_response('key_press', e, game_id)
    except Exception as e:
        game_logger.log_error(request, e, 'key_press', game_id)
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@game_bp.route('/game/<game_id>/hint', methods=['POST'])
def reveal_hint(game_id):
    """Reveal the word's basic hint."""
    game_service = get_game_service()
    if not game_service:
        return _unavailable()

    try:
        game_logger.log_user_action(request, 'reveal_hint', game_id)
        state = game_service.reveal_hint(game_id)
        return jsonify({'success': True, 'hint': state.hint, 'state': asdict(state)})
    except GameError as e:
        return _game_error_response('reveal_hint', e, game_id)


@game_bp.route('/game/<game_id>/chat', methods=['POST'])
def ask_merlion(game_id):
    """Ask the Merlion for a clue."""
    game_service = get_game_service()
    if not game_service:
        return _unavailable()

    data = request.get_json(silent=True) or {}
    message = (data.get('message') or '').strip()
    if not message:
        return jsonify({
            'success': False,
            'error': 'Message is required'
        }), 400

    try:
        game_logger.log_user_action(request, 'ask_merlion', game_id, message_length=len(message))
        reply = game_service.ask_merlion(game_id, message)
        state = game_service.get_game_state(game_id)
        return jsonify({
            'success': reply is not None,
            'reply': reply,
            'chat': state.chat
        })
    except GameError as e:
        return _game_error_response('ask_merlion', e, game_id)


def _post_round_text(game_id, action, produce):
    game_service = get_game_service()
    if not game_service:
        return _unavailable()

    try:
        game_logger.log_user_action(request, action, game_id)
        text = produce(game_service, game_id)
    except GameError as e:
        return _game_error_response(action, e, game_id)

    if text is None:
        return jsonify({
            'success': False,
            'error': 'AI service error'
        }), 503
    return jsonify({'success': True, 'response': text})


@game_bp.route('/game/<game_id>/explain', methods=['POST'])
def explain_word(game_id):
    """Explain the answer once the round is over."""
    return _post_round_text(game_id, 'explain', lambda service, gid: service.explain(gid))


@game_bp.route('/game/<game_id>/funfact', methods=['POST'])
def fun_fact(game_id):
    """Fun fact about the answer once the round is over."""
    return _post_round_text(game_id, 'funfact', lambda service, gid: service.fun_fact(gid))


@game_bp.route('/game/<game_id>', methods=['DELETE'])
def delete_game(game_id):
    """Delete a game session."""
    game_service = get_game_service()
    if not game_service:
        return _unavailable()

    game_logger.log_user_action(request, 'delete_game', game_id)

    success = game_service.delete_game(game_id)
    response_data = {
        'success': success
    }
    game_logger.log_server_response(request, 'delete_game', success, response_data, game_id)

    if success:
        game_logger.log_game_event(game_id, 'game_deleted', request.remote_addr)
        return jsonify(response_data)
    return jsonify(response_data), 404


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    game_service = get_game_service()
    player_service = get_player_service()

    game_logger.log_user_action(request, 'health_check')

    response_data = {
        'status': 'healthy',
        'active_games': len(game_service.games) if game_service else 0,
        'log_stats': game_logger.get_log_stats(),
        'players_available': player_service is not None,
        'players_count': player_service.get_players_count() if player_service else 0
    }

    game_logger.log_server_response(request, 'health_check', True, response_data)
    return jsonify(response_data)
