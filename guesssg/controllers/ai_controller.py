"""
AI Controller

Exposes the Merlion companion directly for clients that hold the word
metadata themselves.
"""

from flask import Blueprint, request, jsonify
from ..services.ai_service import AI_TYPES, get_ai_service
from ..utils.game_logger import game_logger

ai_bp = Blueprint('ai', __name__)


@ai_bp.route('/ai', methods=['POST'])
def generate():
    """Generate a hint, explanation, fun fact or reaction."""
    ai_service = get_ai_service()
    if not ai_service or not ai_service.is_configured():
        return jsonify({'error': 'API key not configured'}), 500

    body = request.get_json(silent=True) or {}
    ai_type = body.get('type')
    if ai_type not in AI_TYPES:
        return jsonify({'error': 'Invalid request type'}), 400

    word = body.get('word')
    category = body.get('category')
    if not word or not category:
        return jsonify({'error': 'word and category are required'}), 400

    game_logger.log_user_action(request, 'ai_request', ai_type=ai_type, category=category)

    try:
        response = ai_service.generate(
            ai_type,
            word,
            category,
            hint=body.get('hint'),
            guess_number=body.get('guessNumber'),
            won=body.get('won'),
            user_message=body.get('userMessage'),
        )
    except Exception as e:
        game_logger.log_error(request, e, 'ai_request')
        return jsonify({'error': 'Internal server error'}), 500

    if response is None:
        return jsonify({'error': 'AI service error'}), 500

    return jsonify({'response': response})
