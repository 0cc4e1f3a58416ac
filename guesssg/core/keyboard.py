"""
Keyboard Status Aggregator

Folds scored rows into the best-known status of every letter.
"""

from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..models.game import TileState

# Higher wins; letters missing from the mapping rank below everything
PRIORITY: Dict[TileState, int] = {
    TileState.ABSENT: 1,
    TileState.PRESENT: 2,
    TileState.CORRECT: 3,
}


def rank(status: Optional[TileState]) -> int:
    return PRIORITY.get(status, 0) if status is not None else 0


def merge(current: Mapping[str, TileState],
          new_row: Iterable[Tuple[str, TileState]]) -> Dict[str, TileState]:
    """
    Merge one submitted row into the keyboard status.

    Status can only progress in priority order CORRECT > PRESENT > ABSENT.
    The input mapping is left untouched; a new dict is returned.
    """
    merged = dict(current)
    for letter, candidate in new_row:
        if candidate not in PRIORITY:
            # EMPTY/FILLED never reach the keyboard
            continue
        letter = letter.upper()
        if rank(candidate) >= rank(merged.get(letter)):
            merged[letter] = candidate
    return merged
