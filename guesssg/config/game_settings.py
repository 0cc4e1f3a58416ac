"""
Game Configuration Constants Module

This module defines the game rules, the category catalogue and the word bank.
All game parameters are centralized here to enable easy modification.
"""

import json
import os
from typing import Dict, Final, List

# Core Game Configuration Constants
MAX_ATTEMPTS: Final[int] = 6
"""
Maximum number of guess attempts allowed per round.
Type: Final[int] - Immutable to prevent accidental modification
"""

GAME_TTL_SECONDS: Final[int] = 6 * 60 * 60
"""
Idle time after which an in-memory game session is dropped.
"""

ALL_CATEGORY: Final[str] = "all"

CATEGORIES: Final[Dict[str, Dict[str, str]]] = {
    "food": {"label": "Local Eats", "subtitle": "Hawker favorites & dishes", "icon": "🍜"},
    "places": {"label": "Landmarks", "subtitle": "Iconic spots to visit", "icon": "🏙️"},
    "singlish": {"label": "Local Slang", "subtitle": "Uniquely Singaporean lingo", "icon": "🗣️"},
    ALL_CATEGORY: {"label": "Mix It Up", "subtitle": "A bit of everything!", "icon": "🎲"},
}

KEYBOARD_ROWS: Final[List[List[str]]] = [
    ["Q", "W", "E", "R", "T", "Y", "U", "I", "O", "P"],
    ["A", "S", "D", "F", "G", "H", "J", "K", "L"],
    ["ENTER", "Z", "X", "C", "V", "B", "N", "M", "⌫"],
]

_REQUIRED_FIELDS = ("word", "hint", "category", "emoji")


# Load word bank from JSON file
def _load_word_bank() -> List[Dict[str, str]]:
    """
    Load the word bank from words.json.

    Returns:
        List[Dict[str, str]]: Entries with an uppercase ``word``, ``hint``,
        ``category`` and ``emoji``

    Raises:
        FileNotFoundError: If words.json file is not found
        ValueError: If the file is malformed, empty or contains invalid entries
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'words.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            entries = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word bank file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in words.json: {e}")

    if not isinstance(entries, list):
        raise ValueError("JSON file must contain an array of word entries")

    if not entries:
        raise ValueError("Word bank cannot be empty")

    words = []
    for entry in entries:
        missing = [key for key in _REQUIRED_FIELDS if not entry.get(key)]
        if missing:
            raise ValueError(f"Word entry {entry!r} is missing {', '.join(missing)}")

        word = entry["word"].strip().upper()
        if not word.isalpha():
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")
        if entry["category"] not in CATEGORIES or entry["category"] == ALL_CATEGORY:
            raise ValueError(f"Word '{word}' has unknown category '{entry['category']}'")

        words.append({**entry, "word": word})

    return words


# Curated word bank loaded from JSON file
WORD_BANK: Final[List[Dict[str, str]]] = _load_word_bank()


def validate_word_bank_integrity() -> bool:
    """
    Validates the integrity and consistency of the word bank.

    This function performs validation to ensure:
    1. Character validation: Only alphabetic characters allowed
    2. Format validation: Consistent uppercase formatting
    3. Uniqueness validation: No duplicate entries
    4. Coverage validation: Every real category has at least one word

    Returns:
        bool: True if the word bank passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not WORD_BANK:
        raise ValueError("Word bank cannot be empty")

    words = [entry["word"] for entry in WORD_BANK]

    for index, word in enumerate(words):
        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

        if not word.isupper():
            raise ValueError(f"Word at index {index} '{word}' is not in uppercase format")

    if len(words) != len(set(words)):
        duplicates = sorted({word for word in words if words.count(word) > 1})
        raise ValueError(f"Duplicate words found in word bank: {duplicates}")

    for category in CATEGORIES:
        if category == ALL_CATEGORY:
            continue
        if not any(entry["category"] == category for entry in WORD_BANK):
            raise ValueError(f"Category '{category}' has no words")

    return True


def get_word_statistics() -> dict:
    """
    Analyzes the word bank and returns statistical information.

    Returns:
        dict: Statistical analysis including:
            - total_words: Number of words in the bank
            - words_per_category: Count of words in each category
            - length_distribution: Number of words per word length
            - letter_frequency: Distribution of letters across all words
    """
    if not WORD_BANK:
        return {"error": "Word bank is empty"}

    words_per_category: Dict[str, int] = {}
    length_distribution: Dict[int, int] = {}
    letter_frequency: Dict[str, int] = {}

    for entry in WORD_BANK:
        word = entry["word"]
        words_per_category[entry["category"]] = words_per_category.get(entry["category"], 0) + 1
        length_distribution[len(word)] = length_distribution.get(len(word), 0) + 1
        for char in word:
            letter_frequency[char] = letter_frequency.get(char, 0) + 1

    return {
        "total_words": len(WORD_BANK),
        "words_per_category": words_per_category,
        "length_distribution": length_distribution,
        "letter_frequency": letter_frequency,
        "most_common_letters": sorted(letter_frequency.items(), key=lambda x: x[1], reverse=True)[:5]
    }


if __name__ == "__main__":

    try:
        validate_word_bank_integrity()
        print(" Word bank validation passed")

        stats = get_word_statistics()
        print(f" Word bank statistics: {stats}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
