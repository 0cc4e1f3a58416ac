"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GameState, GuessResult, Outcome, TileState, WordData
from .player import GameResult, LeaderboardEntry, Player, PlayerStats

__all__ = [
    'GameState', 'GuessResult', 'Outcome', 'TileState', 'WordData',
    'GameResult', 'LeaderboardEntry', 'Player', 'PlayerStats'
]
