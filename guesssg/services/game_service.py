"""
Game Service

Session orchestration for GuessSG rounds: word selection, keyboard input,
guess submission, end-of-round bookkeeping and the Merlion companion.
"""

import logging
import threading
import time
import uuid
from typing import Callable, Dict, List, Optional

from ..config.game_settings import GAME_TTL_SECONDS, MAX_ATTEMPTS
from ..core.exceptions import GameNotFound, InvalidGuess, RoundInProgress, RoundTerminated
from ..core.round import RoundStateMachine
from ..models.game import GameState, Outcome, TileState
from ..models.player import PlayerStats
from ..utils.game_logger import game_logger
from .ai_service import AIService, get_ai_service
from .player_service import PlayerService, get_player_service
from .word_service import WordService, get_word_service

logger = logging.getLogger(__name__)

ENTER_KEYS = ("ENTER",)
BACKSPACE_KEYS = ("BACKSPACE", "⌫")


def run_in_thread(task: Callable, *args) -> threading.Thread:
    """Default task runner: a daemon thread per task."""
    thread = threading.Thread(target=task, args=args, daemon=True)
    thread.start()
    return thread


class GameService:
    """
    Core game service managing multiple game sessions.

    This class handles:
    - Game session management with unique game IDs
    - Word selection and secure answer storage
    - Keystroke handling with a single submission path
    - Stats once a round ends, with result persistence and the AI reaction
      finished in the background so the final guess is answered at once
    """

    def __init__(self,
                 word_service: Optional[WordService] = None,
                 player_service: Optional[PlayerService] = None,
                 ai_service: Optional[AIService] = None,
                 max_attempts: int = MAX_ATTEMPTS,
                 task_runner: Optional[Callable] = None,
                 game_ttl_seconds: float = GAME_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.games: Dict[str, Dict] = {}  # Store active games by game_id
        self.max_attempts = max_attempts
        self.task_runner = task_runner or run_in_thread
        self.game_ttl_seconds = game_ttl_seconds
        self.clock = clock
        # Called with (game_id, state) once the background finish is done
        self.round_listeners: List[Callable] = []
        self._word_service = word_service
        self._player_service = player_service
        self._ai_service = ai_service

    @property
    def word_service(self) -> WordService:
        return self._word_service or get_word_service() or WordService()

    @property
    def player_service(self) -> Optional[PlayerService]:
        return self._player_service or get_player_service()

    @property
    def ai_service(self) -> Optional[AIService]:
        return self._ai_service or get_ai_service()

    def create_new_game(self,
                        category: str = "all",
                        player_id: Optional[str] = None,
                        stats: Optional[PlayerStats] = None,
                        daily: bool = True) -> str:
        """
        Creates a new game session.

        Args:
            category: Word category, or "all"
            player_id: Profile the result is saved for; None plays as guest
            stats: Caller-held stats carried into this session
            daily: Use the daily word instead of a random practice word

        Returns:
            str: Unique game ID for this session

        Raises:
            UnknownCategory: If the category is not configured
        """
        if daily:
            word = self.word_service.fetch_word(category)
        else:
            word = self.word_service.random_word(category)

        self.prune_stale_games()

        game_id = str(uuid.uuid4())
        self.games[game_id] = {
            "word": word,
            "requested_category": category,
            "round": RoundStateMachine(word.word, self.max_attempts),
            "current_guess": "",
            "player_id": player_id,
            "stats": stats or PlayerStats(),
            "daily": daily,
            "hint_revealed": False,
            "reaction": None,
            "chat": [],
            "finalized": False,
            "finishing": False,
            "last_active": self.clock(),
        }
        return game_id

    def _get_game(self, game_id: str) -> Dict:
        game = self.games.get(game_id)
        if game is None:
            raise GameNotFound(f"Game {game_id} not found")
        game["last_active"] = self.clock()
        return game

    def prune_stale_games(self) -> int:
        """
        Drops sessions nobody has touched for ``game_ttl_seconds``.

        Returns:
            int: Number of sessions removed
        """
        cutoff = self.clock() - self.game_ttl_seconds
        stale = [game_id for game_id, game in self.games.items() if game["last_active"] < cutoff]
        for game_id in stale:
            self.games.pop(game_id, None)
        if stale:
            logger.info(f"Pruned {len(stale)} stale game(s)")
        return len(stale)

    def get_round(self, game_id: str) -> RoundStateMachine:
        return self._get_game(game_id)["round"]

    def get_game_state(self, game_id: str) -> Optional[GameState]:
        """
        Returns the current game state for a session (without revealing the answer).

        Args:
            game_id: Unique game identifier

        Returns:
            GameState object or None if game not found
        """
        if game_id not in self.games:
            return None

        game = self.games[game_id]
        game_round: RoundStateMachine = game["round"]
        word = game["word"]

        return GameState(
            game_id=game_id,
            category=word.category,
            emoji=word.emoji,
            word_length=game_round.word_length,
            current_attempt=game_round.attempt,
            max_attempts=game_round.max_attempts,
            outcome=game_round.outcome.value,
            game_over=game_round.is_over,
            won=game_round.outcome is Outcome.WON,
            current_guess=game["current_guess"],
            board=self._build_board(game),
            keyboard_status={letter: status.value for letter, status in game_round.keyboard_status.items()},
            guesses=game_round.guesses,
            stats=game["stats"].to_dict(),
            hint=word.hint if game["hint_revealed"] or game_round.is_over else None,
            answer=word.word if game_round.is_over else None,
            reaction=game["reaction"],
            reaction_pending=game["finishing"],
            chat=list(game["chat"]),
            player_id=game["player_id"],
            daily=game["daily"],
        )

    def _build_board(self, game: Dict) -> List[List[Dict[str, str]]]:
        """Every row of the grid, submitted rows first, then the row being typed."""
        game_round: RoundStateMachine = game["round"]
        board = []
        for row in game_round.history:
            board.append([{"letter": letter, "state": status.value} for letter, status in row])

        if not game_round.is_over:
            current = game["current_guess"]
            board.append([
                {"letter": current[i], "state": TileState.FILLED.value} if i < len(current)
                else {"letter": "", "state": TileState.EMPTY.value}
                for i in range(game_round.word_length)
            ])

        while len(board) < game_round.max_attempts:
            board.append([{"letter": "", "state": TileState.EMPTY.value}] * game_round.word_length)
        return board

    def press_key(self, game_id: str, key: str) -> GameState:
        """
        Feeds one keystroke into the round.

        Letters fill the current row and the row is submitted as soon as it is
        full; ENTER submits explicitly. Both go through ``submit_guess``.
        Keys after the round has ended, and unknown keys, are ignored.

        Raises:
            GameNotFound: If the game does not exist
            InvalidGuess: If the key is not a string
            LengthMismatch: If ENTER is pressed on an incomplete row
        """
        game = self._get_game(game_id)
        game_round: RoundStateMachine = game["round"]

        if key is not None and not isinstance(key, str):
            raise InvalidGuess("Key must be a string")
        key = (key or "").upper()

        if game_round.is_over:
            return self.get_game_state(game_id)

        if key in ENTER_KEYS:
            return self.submit_guess(game_id, game["current_guess"])

        if key in BACKSPACE_KEYS:
            game["current_guess"] = game["current_guess"][:-1]
            return self.get_game_state(game_id)

        if len(key) == 1 and key.isascii() and key.isalpha() \
                and len(game["current_guess"]) < game_round.word_length:
            game["current_guess"] += key
            if len(game["current_guess"]) == game_round.word_length:
                return self.submit_guess(game_id, game["current_guess"])

        return self.get_game_state(game_id)

    def submit_guess(self, game_id: str, guess: str) -> GameState:
        """
        Processes a guess and updates game state.

        Args:
            game_id: Unique game identifier
            guess: The guessed word

        Returns:
            Updated GameState

        Raises:
            GameNotFound: If the game does not exist
            InvalidGuess: If the guess is not made of letters only
            LengthMismatch: If the guess length differs from the word's
            RoundTerminated: If the round is already over
        """
        game = self._get_game(game_id)

        game_round: RoundStateMachine = game["round"]
        if game_round.is_over:
            raise RoundTerminated(game_round.outcome.value)

        if not isinstance(guess, str):
            raise InvalidGuess("Guess must be a valid string")

        normalized_guess = guess.strip().upper()
        if normalized_guess and not (normalized_guess.isascii() and normalized_guess.isalpha()):
            raise InvalidGuess("Guess must contain only letters")

        result = game["round"].submit_guess(normalized_guess)
        game["current_guess"] = ""

        if result.outcome is not Outcome.IN_PROGRESS:
            self._finalize_round(game_id, game)

        return self.get_game_state(game_id)

    def _finalize_round(self, game_id: str, game: Dict) -> None:
        """
        Runs once per round after a terminal outcome. Stats are updated
        before returning; persistence and the companion's reaction are handed
        to the task runner so the caller is not held up by MongoDB or
        Perplexity.
        """
        if game["finalized"]:
            return
        game["finalized"] = True

        won = game["round"].outcome is Outcome.WON
        game["stats"] = game["stats"].record(won)

        game["finishing"] = True
        try:
            self.task_runner(self._finish_round, game_id, game)
        except Exception as e:
            game["finishing"] = False
            logger.error(f"Failed to schedule end-of-round work for game {game_id}: {e}")

    def _finish_round(self, game_id: str, game: Dict) -> None:
        """Background half of finalization. External failures only get logged."""
        game_round: RoundStateMachine = game["round"]
        word = game["word"]
        won = game_round.outcome is Outcome.WON

        try:
            player_service = self.player_service
            if game["player_id"] and player_service:
                try:
                    saved = player_service.save_game_result(game["player_id"], word.word, game_round.attempt, won)
                except Exception as e:
                    saved = False
                    logger.error(f"Failed to save game result: {e}")

                if saved:
                    game_logger.log_game_event(
                        game_id, 'result_saved', None,
                        player_id=game["player_id"], attempts=game_round.attempt, won=won
                    )
                else:
                    logger.warning(f"Result for player {game['player_id']} was not saved")

            ai_service = self.ai_service
            if ai_service:
                try:
                    game["reaction"] = ai_service.generate(
                        "reaction", word.word, word.category, word.hint,
                        guess_number=game_round.attempt, won=won
                    )
                except Exception as e:
                    logger.error(f"Failed to fetch AI reaction: {e}")
        finally:
            game["finishing"] = False

        if game_id not in self.games:
            return
        state = self.get_game_state(game_id)
        for listener in list(self.round_listeners):
            try:
                listener(game_id, state)
            except Exception as e:
                logger.error(f"Round listener failed for game {game_id}: {e}")

    def reveal_hint(self, game_id: str) -> GameState:
        """Shows the word's basic hint for the rest of the round."""
        self._get_game(game_id)["hint_revealed"] = True
        return self.get_game_state(game_id)

    def ask_merlion(self, game_id: str, message: str) -> Optional[str]:
        """
        Sends a chat question to the Merlion and records both sides.

        Returns:
            The Merlion's reply, or None if the companion is unavailable
        """
        game = self._get_game(game_id)
        message = (message or "").strip()
        if not message:
            return None

        word = game["word"]
        game["chat"].append({"role": "user", "content": message})

        ai_service = self.ai_service
        reply = ai_service.generate("hint", word.word, word.category, word.hint, user_message=message) \
            if ai_service else None
        if reply:
            game["chat"].append({"role": "merlion", "content": reply})
        return reply

    def _post_round_text(self, game_id: str, ai_type: str) -> Optional[str]:
        game = self._get_game(game_id)
        if not game["round"].is_over:
            raise RoundInProgress("Available once the round is over")

        ai_service = self.ai_service
        if not ai_service:
            return None
        word = game["word"]
        return ai_service.generate(ai_type, word.word, word.category, word.hint)

    def explain(self, game_id: str) -> Optional[str]:
        """Merlion's explanation of the answer, after the round."""
        return self._post_round_text(game_id, "explain")

    def fun_fact(self, game_id: str) -> Optional[str]:
        """Merlion's fun fact about the answer, after the round."""
        return self._post_round_text(game_id, "funfact")

    def delete_game(self, game_id: str) -> bool:
        """
        Removes a game session from memory.

        Args:
            game_id: Unique game identifier

        Returns:
            bool: True if game was deleted, False if not found
        """
        if game_id in self.games:
            del self.games[game_id]
            return True
        return False


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(word_service: Optional[WordService] = None,
                            player_service: Optional[PlayerService] = None,
                            ai_service: Optional[AIService] = None,
                            max_attempts: int = MAX_ATTEMPTS,
                            task_runner: Optional[Callable] = None,
                            game_ttl_seconds: float = GAME_TTL_SECONDS) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(word_service, player_service, ai_service, max_attempts,
                                task_runner=task_runner, game_ttl_seconds=game_ttl_seconds)
    return _game_service
