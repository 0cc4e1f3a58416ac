"""
WebSocket Event Handlers

Handles WebSocket events for live play: keystrokes and guesses go through
the same game service calls as the HTTP endpoints. Each socket joins its
game's room, which also receives the end-of-round reaction once it arrives.
"""

from dataclasses import asdict
from flask import request
from flask_socketio import emit, join_room

from ..core.exceptions import GameError
from ..services.game_service import get_game_service, run_in_thread
from ..utils.game_logger import game_logger


def _emit_state(state, finished_now=False):
    emit('game_state_update', {
        'success': True,
        'state': asdict(state)
    })

    if finished_now:
        emit('game_over', {
            'game_id': state.game_id,
            'won': state.won,
            'attempts': state.current_attempt,
            'answer': state.answer,
            'reaction': state.reaction,
            'stats': state.stats
        })

        game_logger.log_game_event(
            state.game_id, 'game_won' if state.won else 'game_lost', request.remote_addr,
            player_id=state.player_id, attempts_used=state.current_attempt,
            target_word=state.answer, transport='websocket'
        )


def _game_room(game_id):
    return f"game_{game_id}"


def attach_round_broadcast(socketio, game_service):
    """
    Run end-of-round work as Socket.IO background tasks and push the
    finished reaction to everyone in the game's room.
    """
    if game_service.task_runner is run_in_thread:
        game_service.task_runner = socketio.start_background_task

    def broadcast(game_id, state):
        socketio.emit('round_finished', {
            'game_id': game_id,
            'reaction': state.reaction,
            'state': asdict(state)
        }, room=_game_room(game_id))

    game_service.round_listeners.append(broadcast)


def _emit_error(error, game_id=None):
    emit('error', {
        'game_id': game_id,
        'error': str(error),
        'error_type': type(error).__name__
    })


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""
    game_service = get_game_service()
    if game_service:
        attach_round_broadcast(socketio, game_service)

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('join_game')
    def handle_join_game(data):
        """Receive the current state of a game."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        game_id = data.get('game_id') if isinstance(data, dict) else None
        state = game_service.get_game_state(game_id) if game_id else None
        if state is None:
            emit('error', {'game_id': game_id, 'error': 'Game not found'})
            return

        join_room(_game_room(game_id))
        game_logger.logger.info(f"WebSocket: {request.sid} opened game {game_id}")

        emit('game_state_update', {
            'success': True,
            'state': asdict(state)
        })

    @socketio.on('key_press')
    def handle_key_press(data):
        """Feed one keystroke into a game."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        data = data if isinstance(data, dict) else {}
        game_id = data.get('game_id')
        key = data.get('key')
        if not game_id or not key:
            emit('error', {'game_id': game_id, 'error': 'game_id and key are required'})
            return

        try:
            was_over = game_service.get_round(game_id).is_over
            join_room(_game_room(game_id))
            state = game_service.press_key(game_id, key)
        except GameError as e:
            _emit_error(e, game_id)
            return

        _emit_state(state, finished_now=state.game_over and not was_over)

    @socketio.on('submit_guess')
    def handle_submit_guess(data):
        """Submit a whole guess."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        data = data if isinstance(data, dict) else {}
        game_id = data.get('game_id')
        guess = data.get('guess')
        if not game_id or guess is None:
            emit('error', {'game_id': game_id, 'error': 'game_id and guess are required'})
            return

        try:
            game_service.get_round(game_id)
            join_room(_game_room(game_id))
            state = game_service.submit_guess(game_id, guess)
        except GameError as e:
            _emit_error(e, game_id)
            return

        _emit_state(state, finished_now=state.game_over)
