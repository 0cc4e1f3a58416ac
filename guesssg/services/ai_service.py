"""
AI Companion Service

Talks to the Perplexity chat completions API to produce the Merlion's hints,
explanations, fun facts and end-of-round reactions. Every failure degrades
to ``None`` so the game never waits on the companion.
"""

import logging
from typing import Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

PERPLEXITY_URL = "https://api.perplexity.ai/chat/completions"
DEFAULT_MODEL = "sonar"
FALLBACK_RESPONSE = "Something went wrong!"

AI_TYPES = ("hint", "explain", "funfact", "reaction")

HINT_SYSTEM_PROMPT = (
    "You are the Merlion, Singapore's friendly mascot. Help players guess a Singapore-related word. "
    "You can sprinkle in light Singlish phrases (like \"lah\" or \"can\") but keep it understandable "
    "for tourists. Give helpful but not too obvious hints. Never reveal the actual word. "
    "Keep responses under 40 words."
)

EXPLAIN_SYSTEM_PROMPT = """You are a Singapore culture guide helping visitors learn. Provide clear, structured explanations with markdown formatting. Use this format:

**What it is:** (1 sentence definition)

**Origin:** (1-2 sentences on history/background)

**Where to find it:** (specific locations in Singapore)

Keep it concise and practical. Max 80 words total."""

FUNFACT_SYSTEM_PROMPT = """You are a Singapore expert sharing bite-sized facts. Use markdown formatting:

**Did you know?** (one surprising fact, 1-2 sentences)

**Pro tip:** (practical advice for visitors, 1 sentence)

Keep it under 50 words total. Focus on what tourists would find interesting or useful."""

REACTION_SYSTEM_PROMPT = (
    "You are a friendly companion. React briefly to game results. Use minimal Singlish "
    "(maximum one light expression like \"lah\"). Keep responses clear, short, and encouraging. "
    "Maximum 15 words."
)


def build_prompts(ai_type: str,
                  word: str,
                  category: str,
                  hint: Optional[str] = None,
                  guess_number: Optional[int] = None,
                  won: Optional[bool] = None,
                  user_message: Optional[str] = None) -> Tuple[str, str]:
    """
    Build the (system, user) prompt pair for a request type.

    Raises:
        ValueError: If ``ai_type`` is not one of AI_TYPES
    """
    if ai_type == "hint":
        if user_message:
            user_prompt = (
                f"The secret word is \"{word}\" (category: {category}). Basic hint: \"{hint}\". "
                f"Player asks: \"{user_message}\". Give a helpful clue without revealing the word."
            )
        else:
            user_prompt = (
                f"The secret word is \"{word}\" (category: {category}). "
                f"Give a creative hint that doesn't reveal the word directly."
            )
        return HINT_SYSTEM_PROMPT, user_prompt

    if ai_type == "explain":
        return EXPLAIN_SYSTEM_PROMPT, (
            f"Explain \"{word}\" (category: {category}). Context: \"{hint}\". "
            f"Make it useful for tourists visiting Singapore."
        )

    if ai_type == "funfact":
        return FUNFACT_SYSTEM_PROMPT, (
            f"Share a fun fact about \"{word}\" in Singapore (category: {category}). Context: \"{hint}\"."
        )

    if ai_type == "reaction":
        if won:
            user_prompt = (
                f"Player won! Guessed \"{word}\" in {guess_number} tries. "
                f"Give a brief, warm celebration."
            )
        else:
            user_prompt = f"Player lost on \"{word}\". Give brief encouragement to try again."
        return REACTION_SYSTEM_PROMPT, user_prompt

    raise ValueError(f"Invalid request type: {ai_type}")


class AIService:
    """Perplexity-backed companion."""

    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL, timeout: float = 15.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = requests.Session()

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def generate(self,
                 ai_type: str,
                 word: str,
                 category: str,
                 hint: Optional[str] = None,
                 guess_number: Optional[int] = None,
                 won: Optional[bool] = None,
                 user_message: Optional[str] = None) -> Optional[str]:
        """
        Generate companion text.

        Args:
            ai_type: One of "hint", "explain", "funfact", "reaction"
            word: The secret word
            category: The word's category
            hint: Basic hint shipped with the word
            guess_number: Attempts used (reaction only)
            won: Round outcome (reaction only)
            user_message: Player's chat question (hint only)

        Returns:
            The generated text, or None when the service is unavailable

        Raises:
            ValueError: If ``ai_type`` is unknown
        """
        system_prompt, user_prompt = build_prompts(
            ai_type, word, category, hint, guess_number, won, user_message
        )

        if not self.is_configured():
            logger.warning("AI companion not configured - skipping %s request", ai_type)
            return None

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": 150,
            "temperature": 0.7,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(PERPLEXITY_URL, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Perplexity API error: {e}")
            return None
        except ValueError as e:
            logger.error(f"Perplexity API returned invalid JSON: {e}")
            return None

        return self._extract_content(data)

    @staticmethod
    def _extract_content(data: Dict) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return FALLBACK_RESPONSE
        return content or FALLBACK_RESPONSE


# Global service instance
_ai_service = None


def get_ai_service() -> Optional[AIService]:
    """Get the global AI service instance."""
    return _ai_service


def initialize_ai_service(api_key: Optional[str], model: str = DEFAULT_MODEL, timeout: float = 15.0) -> AIService:
    """Initialize the global AI service instance."""
    global _ai_service
    _ai_service = AIService(api_key, model, timeout)
    return _ai_service
