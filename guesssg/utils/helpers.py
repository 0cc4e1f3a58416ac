"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict, Optional
from flask import request


def get_user_identity(request_obj=None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    player = getattr(request_obj, 'player', None) or {}

    return {
        'user_ip': request_obj.remote_addr or 'unknown',
        'player_id': player.get('id'),
        'nickname': player.get('nickname')
    }


def get_bearer_token(request_obj=None) -> Optional[str]:
    """Token from an ``Authorization: Bearer <token>`` header, if any."""
    if request_obj is None:
        request_obj = request

    auth_header = request_obj.headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    return auth_header.split(' ', 1)[1].strip() or None
