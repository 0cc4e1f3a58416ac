"""
Round Engine Package

Pure game logic: letter scoring, keyboard status aggregation and the round
state machine. Nothing in here performs I/O.
"""

from .exceptions import (
    GameError, GameNotFound, InvalidGuess, LengthMismatch, RoundInProgress, RoundTerminated,
    UnknownCategory
)
from .keyboard import merge
from .round import DEFAULT_MAX_ATTEMPTS, RoundStateMachine
from .scoring import normalize, score

__all__ = [
    'GameError', 'GameNotFound', 'InvalidGuess', 'LengthMismatch', 'RoundInProgress', 'RoundTerminated',
    'UnknownCategory', 'merge', 'DEFAULT_MAX_ATTEMPTS', 'RoundStateMachine',
    'normalize', 'score'
]
