class GameError(Exception):
    """Base exception for GuessSG game errors."""
    pass


class LengthMismatch(GameError):
    """Raised when a guess is not the same length as the secret word."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Guess must be exactly {expected} letters (got {actual})")


class RoundTerminated(GameError):
    """Raised when a guess is submitted after the round is already decided."""

    def __init__(self, outcome: str):
        self.outcome = outcome
        super().__init__(f"Round is already over ({outcome})")


class InvalidGuess(GameError):
    """Raised when a guess contains anything other than letters."""
    pass


class RoundInProgress(GameError):
    """Raised when something that would reveal the answer is asked for mid-round."""
    pass


class GameNotFound(GameError):
    """Raised when a game id does not match any active session."""
    pass


class UnknownCategory(GameError):
    """Raised when a word category is not in the word bank."""
    pass
