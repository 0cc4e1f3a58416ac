"""
Round State Machine

Owns the state of a single playthrough: the secret word, submitted rows,
keyboard status, attempt count and outcome.
"""

from typing import Dict, List, Optional, Tuple

from ..models.game import GuessResult, GuessRow, Outcome, TileState
from .exceptions import LengthMismatch, RoundTerminated
from .keyboard import merge
from .scoring import normalize, score

DEFAULT_MAX_ATTEMPTS = 6


class RoundStateMachine:
    """
    State machine for one round.

    The outcome moves from IN_PROGRESS to WON or LOST and never leaves a
    terminal state; a new round needs a fresh instance or ``start``.
    Every submission goes through ``submit_guess``.
    """

    def __init__(self, secret: Optional[str] = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self._secret = ''
        self._max_attempts = max_attempts
        self._history: List[GuessRow] = []
        self._keyboard_status: Dict[str, TileState] = {}
        self._attempt = 0
        self._outcome = Outcome.IN_PROGRESS
        if secret is not None:
            self.start(secret, max_attempts)

    def start(self, secret: str, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        """Reset to a new round for ``secret``."""
        self._secret = normalize(secret)
        self._max_attempts = max_attempts
        self._history = []
        self._keyboard_status = {}
        self._attempt = 0
        self._outcome = Outcome.IN_PROGRESS

    def submit_guess(self, guess: str) -> GuessResult:
        """
        Score a guess and advance the round.

        Args:
            guess: Word of the same length as the secret, any case

        Returns:
            GuessResult with the scored row, merged keyboard status and new outcome

        Raises:
            RoundTerminated: If the round is already won or lost
            LengthMismatch: If the guess length differs from the secret's
        """
        if self._outcome is not Outcome.IN_PROGRESS:
            raise RoundTerminated(self._outcome.value)

        normalized_guess = normalize(guess)
        if len(normalized_guess) != len(self._secret):
            raise LengthMismatch(len(self._secret), len(normalized_guess))

        classifications = score(self._secret, normalized_guess)
        row: GuessRow = list(zip(normalized_guess, classifications))

        self._history.append(row)
        self._keyboard_status = merge(self._keyboard_status, row)
        self._attempt += 1

        # Win is checked before exhaustion so a last-attempt hit still wins
        if all(status is TileState.CORRECT for status in classifications):
            self._outcome = Outcome.WON
        elif self._attempt >= self._max_attempts:
            self._outcome = Outcome.LOST

        return GuessResult(
            row=list(row),
            keyboard_status=dict(self._keyboard_status),
            outcome=self._outcome,
        )

    @property
    def secret(self) -> str:
        return self._secret

    @property
    def word_length(self) -> int:
        return len(self._secret)

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def attempt(self) -> int:
        return self._attempt

    @property
    def attempts_remaining(self) -> int:
        return self._max_attempts - self._attempt

    @property
    def history(self) -> List[List[Tuple[str, TileState]]]:
        return [list(row) for row in self._history]

    @property
    def keyboard_status(self) -> Dict[str, TileState]:
        return dict(self._keyboard_status)

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def is_over(self) -> bool:
        return self._outcome is not Outcome.IN_PROGRESS

    @property
    def guesses(self) -> List[str]:
        return [''.join(letter for letter, _ in row) for row in self._history]
