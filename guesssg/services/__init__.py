"""
Services Package

Contains all business logic and service classes.
"""

from .ai_service import AIService, get_ai_service
from .game_service import GameService, get_game_service
from .leaderboard_service import LeaderboardService, get_leaderboard_service
from .player_service import PlayerService, get_player_service
from .word_service import WordService, get_word_service

__all__ = [
    'AIService', 'get_ai_service',
    'GameService', 'get_game_service',
    'LeaderboardService', 'get_leaderboard_service',
    'PlayerService', 'get_player_service',
    'WordService', 'get_word_service'
]
