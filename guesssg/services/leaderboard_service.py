"""
Leaderboard Service

Aggregates persisted game results into ranked player entries.
"""

import logging
from dataclasses import asdict
from typing import Dict, Iterable, List, Optional

from pymongo.errors import PyMongoError

from ..models.player import LeaderboardEntry
from .player_service import PlayerService, get_player_service

logger = logging.getLogger(__name__)

SORT_KEYS = {
    "wins": lambda entry: entry.games_won,
    "rate": lambda entry: entry.win_rate,
    "games": lambda entry: entry.games_played,
}

DEFAULT_LIMIT = 50


def _percent(part: int, whole: int) -> int:
    # Half-up, so 12.5% shows as 13%
    return int(part / whole * 100 + 0.5) if whole else 0


def build_leaderboard(players: Iterable[Dict],
                      results: Iterable[Dict],
                      sort_by: str = "wins",
                      limit: int = DEFAULT_LIMIT) -> List[LeaderboardEntry]:
    """
    Rank players by their game results.

    Average attempts only counts won games. Players without any finished
    game are left out.

    Args:
        players: Dicts with ``id`` and ``nickname``
        results: Dicts with ``player_id``, ``won`` and ``attempts``
        sort_by: "wins", "rate" or "games"
        limit: Maximum number of entries returned

    Raises:
        ValueError: If ``sort_by`` is not a known sort key
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Invalid sort key '{sort_by}'. Must be one of {', '.join(SORT_KEYS)}")

    stats_map: Dict[str, Dict[str, int]] = {}
    for result in results:
        stats = stats_map.setdefault(str(result["player_id"]), {"played": 0, "won": 0, "total_attempts": 0})
        stats["played"] += 1
        if result.get("won"):
            stats["won"] += 1
            stats["total_attempts"] += int(result.get("attempts", 0))

    entries = []
    for player in players:
        stats = stats_map.get(str(player["id"]))
        if not stats or stats["played"] == 0:
            continue
        entries.append(LeaderboardEntry(
            nickname=player["nickname"],
            games_played=stats["played"],
            games_won=stats["won"],
            win_rate=_percent(stats["won"], stats["played"]),
            avg_attempts=round(stats["total_attempts"] / stats["won"], 1) if stats["won"] else 0,
        ))

    entries.sort(key=SORT_KEYS[sort_by], reverse=True)

    ranked = entries[:limit]
    for index, entry in enumerate(ranked):
        entry.rank = index + 1
    return ranked


class LeaderboardService:
    """Leaderboard reads on top of the player service's storage."""

    def __init__(self, player_service: Optional[PlayerService] = None):
        self._player_service = player_service

    @property
    def player_service(self) -> Optional[PlayerService]:
        return self._player_service or get_player_service()

    def get_leaderboard(self, sort_by: str = "wins", limit: int = DEFAULT_LIMIT) -> Dict:
        """
        Returns:
            Dictionary with success status and ranked entries, or error
        """
        player_service = self.player_service
        if not player_service:
            return {"success": False, "error": "Player service unavailable"}

        try:
            players = player_service.list_players()
            results = player_service.list_results()
        except PyMongoError as e:
            logger.error(f"Database error reading leaderboard: {e}")
            return {"success": False, "error": f"Database error: {e}"}

        entries = build_leaderboard(players, results, sort_by, limit)
        return {
            "success": True,
            "sort_by": sort_by,
            "entries": [asdict(entry) for entry in entries]
        }


# Global service instance
_leaderboard_service = None


def get_leaderboard_service() -> Optional[LeaderboardService]:
    """Get the global leaderboard service instance."""
    return _leaderboard_service


def initialize_leaderboard_service(player_service: Optional[PlayerService] = None) -> LeaderboardService:
    """Initialize the global leaderboard service instance."""
    global _leaderboard_service
    _leaderboard_service = LeaderboardService(player_service)
    return _leaderboard_service
