"""
Letter Scorer

Implements the Wordle letter evaluation algorithm for words of any length.
"""

from collections import Counter
from typing import List, Optional, Sequence

from ..models.game import TileState
from .exceptions import LengthMismatch


def normalize(word: Sequence[str]) -> str:
    """Join and upper-case a word so comparisons are case-insensitive."""
    return ''.join(word).upper()


def score(secret: Sequence[str], guess: Sequence[str]) -> List[TileState]:
    """
    Classify every position of ``guess`` against ``secret``.

    Exact matches are resolved first and consume the secret's letter counts;
    the remaining positions are then marked PRESENT left to right while the
    letter still has unconsumed occurrences, ABSENT otherwise. A letter is
    therefore never credited more times than it occurs in the secret.

    Args:
        secret: The secret word
        guess: The guessed word, same length as ``secret``

    Returns:
        List[TileState]: One of CORRECT, PRESENT or ABSENT per position

    Raises:
        LengthMismatch: If the two words differ in length
    """
    secret_chars = normalize(secret)
    guess_chars = normalize(guess)

    if len(guess_chars) != len(secret_chars):
        raise LengthMismatch(len(secret_chars), len(guess_chars))

    remaining = Counter(secret_chars)
    result: List[Optional[TileState]] = [None] * len(guess_chars)

    # First pass: exact position matches
    for i, letter in enumerate(guess_chars):
        if letter == secret_chars[i]:
            result[i] = TileState.CORRECT
            remaining[letter] -= 1

    # Second pass: present or absent, left to right
    for i, letter in enumerate(guess_chars):
        if result[i] is not None:
            continue
        if remaining[letter] > 0:
            result[i] = TileState.PRESENT
            remaining[letter] -= 1
        else:
            result[i] = TileState.ABSENT

    return result  # type: ignore[return-value]
