"""
Word Service

Supplies the secret word for a round: a deterministic daily pick per
category, or a random pick for practice rounds.
"""

import datetime
import hashlib
import random
from typing import Dict, List, Optional

from ..config.game_settings import ALL_CATEGORY, CATEGORIES, WORD_BANK
from ..core.exceptions import UnknownCategory
from ..models.game import WordData


class WordService:
    """Word source backed by the curated word bank."""

    def __init__(self, word_bank: Optional[List[Dict[str, str]]] = None):
        self.word_bank = list(word_bank if word_bank is not None else WORD_BANK)

    def categories(self) -> List[Dict[str, str]]:
        """Category catalogue for the category picker."""
        return [{"id": key, **info} for key, info in CATEGORIES.items()]

    def _candidates(self, category: str) -> List[Dict[str, str]]:
        if category not in CATEGORIES:
            raise UnknownCategory(f"Unknown category '{category}'")
        if category == ALL_CATEGORY:
            candidates = self.word_bank
        else:
            candidates = [entry for entry in self.word_bank if entry["category"] == category]
        if not candidates:
            raise UnknownCategory(f"No words available for category '{category}'")
        return candidates

    def fetch_word(self, category: str, day: Optional[datetime.date] = None) -> WordData:
        """
        Returns the daily word for a category.

        The same category on the same date always yields the same word.

        Args:
            category: One of the configured categories, or "all"
            day: Date to pick for (defaults to today)

        Raises:
            UnknownCategory: If the category is not configured
        """
        candidates = self._candidates(category)
        day = day or datetime.date.today()
        digest = hashlib.sha256(f"{day.isoformat()}:{category}".encode('utf-8')).hexdigest()
        return self._to_word_data(candidates[int(digest, 16) % len(candidates)])

    def random_word(self, category: str) -> WordData:
        """Returns a uniformly random word for a practice round."""
        return self._to_word_data(random.choice(self._candidates(category)))

    @staticmethod
    def _to_word_data(entry: Dict[str, str]) -> WordData:
        return WordData(
            word=entry["word"],
            hint=entry["hint"],
            category=entry["category"],
            emoji=entry["emoji"],
        )


# Global service instance
_word_service = None


def get_word_service() -> Optional[WordService]:
    """Get the global word service instance."""
    return _word_service


def initialize_word_service(word_bank: Optional[List[Dict[str, str]]] = None) -> WordService:
    """Initialize the global word service instance."""
    global _word_service
    _word_service = WordService(word_bank)
    return _word_service
