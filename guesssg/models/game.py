"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class TileState(Enum):
    """State of a single tile on the board or a key on the keyboard."""
    EMPTY = "empty"
    FILLED = "filled"
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


# Classifications a submitted tile can hold
CLASSIFICATIONS = (TileState.CORRECT, TileState.PRESENT, TileState.ABSENT)


class Outcome(Enum):
    """Round outcome."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


GuessRow = List[Tuple[str, TileState]]


@dataclass(frozen=True)
class GuessResult:
    """Everything a caller needs to render one submitted guess."""
    row: GuessRow
    keyboard_status: Dict[str, TileState]
    outcome: Outcome

    @property
    def classifications(self) -> List[TileState]:
        return [status for _, status in self.row]


@dataclass(frozen=True)
class WordData:
    """A secret word with the metadata shown alongside it."""
    word: str
    hint: str
    category: str
    emoji: str


@dataclass
class GameState:
    """Server-side game state representation."""
    game_id: str
    category: str
    emoji: str
    word_length: int
    current_attempt: int
    max_attempts: int
    outcome: str
    game_over: bool
    won: bool
    current_guess: str
    board: List[List[Dict[str, str]]]  # Tile states as strings for JSON serialization
    keyboard_status: Dict[str, str]
    guesses: List[str]
    stats: Dict[str, int]
    hint: Optional[str] = None  # Only included once revealed
    answer: Optional[str] = None  # Only included when game is over
    reaction: Optional[str] = None
    reaction_pending: bool = False  # Reaction still being fetched
    chat: List[Dict[str, str]] = field(default_factory=list)
    player_id: Optional[str] = None
    daily: bool = True
