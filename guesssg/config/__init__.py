"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules, categories and the word bank (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    ALL_CATEGORY, CATEGORIES, GAME_TTL_SECONDS, KEYBOARD_ROWS, MAX_ATTEMPTS, WORD_BANK,
    get_word_statistics, validate_word_bank_integrity
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'ALL_CATEGORY', 'CATEGORIES', 'GAME_TTL_SECONDS', 'KEYBOARD_ROWS', 'MAX_ATTEMPTS', 'WORD_BANK',
    'get_word_statistics', 'validate_word_bank_integrity'
]
