"""
Player Data Models

Contains player, result and leaderboard data structures.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass
class Player:
    """Player profile data model."""
    id: str
    nickname: str
    created_at: Optional[datetime] = None


@dataclass
class GameResult:
    """A finished round as persisted for the leaderboard."""
    player_id: str
    word: str
    attempts: int
    won: bool
    played_at: Optional[datetime] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class PlayerStats:
    """
    Per-player running statistics.

    Held by the caller and passed in and out of a game session; nothing here
    touches storage.
    """
    played: int = 0
    won: int = 0
    streak: int = 0
    max_streak: int = 0

    def record(self, won: bool) -> 'PlayerStats':
        """Return the stats after one more finished round."""
        if won:
            streak = self.streak + 1
            return replace(
                self,
                played=self.played + 1,
                won=self.won + 1,
                streak=streak,
                max_streak=max(self.max_streak, streak),
            )
        return replace(self, played=self.played + 1, streak=0)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'PlayerStats':
        """Build stats from client-supplied JSON, ignoring junk fields."""
        if not data:
            return cls()
        values = {}
        for key in ('played', 'won', 'streak', 'max_streak'):
            try:
                values[key] = max(0, int(data.get(key, 0)))
            except (TypeError, ValueError):
                values[key] = 0
        return cls(**values)

    def to_dict(self) -> dict:
        return {
            'played': self.played,
            'won': self.won,
            'streak': self.streak,
            'max_streak': self.max_streak,
        }


@dataclass
class LeaderboardEntry:
    """One ranked row of the leaderboard."""
    nickname: str
    games_played: int
    games_won: int
    win_rate: int
    avg_attempts: float
    rank: int = 0
