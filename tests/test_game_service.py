import threading
import time

import pytest

from guesssg.core.exceptions import GameNotFound, InvalidGuess, LengthMismatch, RoundInProgress, RoundTerminated
from guesssg.models.player import PlayerStats
from guesssg.services import game_service as game_module
from guesssg.services.game_service import GameService, run_in_thread

from conftest import FakeAI, RecordingPlayerService, run_inline

WRONG_GUESSES = ["LAKSA", "SHIOK", "CHOPE", "ROJAK", "PRATA", "BUGIS"]


def type_word(service, game_id, word):
    state = None
    for letter in word:
        state = service.press_key(game_id, letter)
    return state


def test_new_game_state_hides_answer(game_service):
    game_id = game_service.create_new_game("food")
    state = game_service.get_game_state(game_id)

    assert state.word_length == 5
    assert state.current_attempt == 0
    assert state.outcome == "in_progress"
    assert state.answer is None
    assert state.hint is None
    assert len(state.board) == 6
    assert all(tile["state"] == "empty" for row in state.board for tile in row)


def test_unknown_game_returns_none_state(game_service):
    assert game_service.get_game_state("missing") is None
    with pytest.raises(GameNotFound):
        game_service.press_key("missing", "A")


def test_typing_fills_current_row(game_service):
    game_id = game_service.create_new_game()
    state = type_word(game_service, game_id, "TAS")

    assert state.current_guess == "TAS"
    assert [tile["state"] for tile in state.board[0]] == ["filled", "filled", "filled", "empty", "empty"]
    assert state.current_attempt == 0


def test_backspace_removes_last_letter(game_service):
    game_id = game_service.create_new_game()
    type_word(game_service, game_id, "TAS")
    state = game_service.press_key(game_id, "Backspace")
    assert state.current_guess == "TA"
    assert game_service.press_key(game_id, "⌫").current_guess == "T"


def test_full_row_auto_submits_once(game_service):
    game_id = game_service.create_new_game()
    state = type_word(game_service, game_id, "TASTY")

    assert state.current_attempt == 1
    assert state.current_guess == ""
    assert state.guesses == ["TASTY"]
    assert [tile["state"] for tile in state.board[0]] == ["present", "correct", "present", "absent", "correct"]
    assert state.keyboard_status == {"T": "present", "A": "correct", "S": "present", "Y": "correct"}


def test_enter_on_incomplete_row_is_rejected(game_service):
    game_id = game_service.create_new_game()
    type_word(game_service, game_id, "SAT")

    with pytest.raises(LengthMismatch):
        game_service.press_key(game_id, "Enter")
    state = game_service.get_game_state(game_id)
    assert state.current_attempt == 0
    assert state.current_guess == "SAT"


def test_non_letter_keys_are_ignored(game_service):
    game_id = game_service.create_new_game()
    for key in ("1", "Shift", "é", ""):
        state = game_service.press_key(game_id, key)
    assert state.current_guess == ""


def test_submit_guess_validates_input(game_service):
    game_id = game_service.create_new_game()
    with pytest.raises(InvalidGuess):
        game_service.submit_guess(game_id, "SAT4Y")
    with pytest.raises(InvalidGuess):
        game_service.submit_guess(game_id, None)
    with pytest.raises(LengthMismatch):
        game_service.submit_guess(game_id, "")


def test_win_finalizes_round(game_service, fake_ai, recording_players):
    game_id = game_service.create_new_game(player_id="player-1")
    state = game_service.submit_guess(game_id, "satay")

    assert state.won is True
    assert state.game_over is True
    assert state.answer == "SATAY"
    assert state.hint == "A test hint"
    assert state.stats == {"played": 1, "won": 1, "streak": 1, "max_streak": 1}
    assert state.reaction == "Shiok lah, well played!"
    assert recording_players.saved == [("player-1", "SATAY", 1, True)]
    assert fake_ai.calls[-1]["type"] == "reaction"
    assert fake_ai.calls[-1]["won"] is True
    assert fake_ai.calls[-1]["guess_number"] == 1


def test_board_after_win_has_no_typing_row(game_service):
    game_id = game_service.create_new_game()
    game_service.submit_guess(game_id, "TASTY")
    state = game_service.submit_guess(game_id, "SATAY")

    assert len(state.board) == 6
    assert [tile["state"] for tile in state.board[1]] == ["correct"] * 5
    assert all(tile["state"] == "empty" for tile in state.board[2])


def test_loss_after_max_attempts(game_service, recording_players):
    stats = PlayerStats(played=3, won=3, streak=3, max_streak=3)
    game_id = game_service.create_new_game(player_id="player-1", stats=stats)
    for guess in WRONG_GUESSES:
        state = game_service.submit_guess(game_id, guess)

    assert state.outcome == "lost"
    assert state.answer == "SATAY"
    assert state.stats == {"played": 4, "won": 3, "streak": 0, "max_streak": 3}
    assert recording_players.saved == [("player-1", "SATAY", 6, False)]


def test_guest_round_is_not_persisted(game_service, recording_players):
    game_id = game_service.create_new_game()
    game_service.submit_guess(game_id, "SATAY")
    assert recording_players.saved == []


def test_guess_after_round_over_is_rejected(game_service, fake_ai, recording_players):
    game_id = game_service.create_new_game(player_id="player-1")
    game_service.submit_guess(game_id, "SATAY")

    with pytest.raises(RoundTerminated):
        game_service.submit_guess(game_id, "TASTY")
    # Keys after the end are ignored and never finalize twice
    state = type_word(game_service, game_id, "TASTY")
    assert state.current_attempt == 1
    assert len(recording_players.saved) == 1
    assert len([call for call in fake_ai.calls if call["type"] == "reaction"]) == 1


def test_ai_failure_does_not_break_round(satay_words, recording_players):
    service = GameService(satay_words, recording_players, FakeAI(RuntimeError("boom")), task_runner=run_inline)
    game_id = service.create_new_game()
    state = service.submit_guess(game_id, "SATAY")

    assert state.won is True
    assert state.reaction is None


def test_reveal_hint(game_service):
    game_id = game_service.create_new_game()
    assert game_service.reveal_hint(game_id).hint == "A test hint"
    assert game_service.get_game_state(game_id).answer is None


def test_ask_merlion_records_chat(game_service, fake_ai):
    game_id = game_service.create_new_game()
    reply = game_service.ask_merlion(game_id, "Is it spicy?")

    assert reply == "Shiok lah, well played!"
    assert fake_ai.calls[-1]["type"] == "hint"
    assert fake_ai.calls[-1]["user_message"] == "Is it spicy?"
    assert game_service.get_game_state(game_id).chat == [
        {"role": "user", "content": "Is it spicy?"},
        {"role": "merlion", "content": "Shiok lah, well played!"},
    ]


def test_ask_merlion_ignores_blank_message(game_service, fake_ai):
    game_id = game_service.create_new_game()
    assert game_service.ask_merlion(game_id, "   ") is None
    assert fake_ai.calls == []


def test_explain_and_fun_fact_need_finished_round(game_service, fake_ai):
    game_id = game_service.create_new_game()
    with pytest.raises(RoundInProgress):
        game_service.explain(game_id)
    with pytest.raises(RoundInProgress):
        game_service.fun_fact(game_id)

    game_service.submit_guess(game_id, "SATAY")
    assert game_service.explain(game_id) == "Shiok lah, well played!"
    assert game_service.fun_fact(game_id) == "Shiok lah, well played!"
    assert [call["type"] for call in fake_ai.calls[-2:]] == ["explain", "funfact"]


def test_practice_game_uses_random_word(game_service):
    game_id = game_service.create_new_game(daily=False)
    state = game_service.get_game_state(game_id)
    assert state.daily is False
    assert game_service.get_round(game_id).secret == "SATAY"


def test_delete_game(game_service):
    game_id = game_service.create_new_game()
    assert game_service.delete_game(game_id) is True
    assert game_service.delete_game(game_id) is False


class BlockingAI(FakeAI):
    """Holds every request until released."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def generate(self, *args, **kwargs):
        self.release.wait(5)
        return super().generate(*args, **kwargs)


class FailingSavePlayerService(RecordingPlayerService):
    def save_game_result(self, player_id, word, attempts, won):
        return False


def test_final_guess_does_not_wait_for_reaction(satay_words, recording_players):
    ai = BlockingAI()
    threads = []
    service = GameService(
        satay_words, recording_players, ai,
        task_runner=lambda task, *args: threads.append(run_in_thread(task, *args))
    )
    finished = []
    service.round_listeners.append(lambda game_id, state: finished.append(state))
    game_id = service.create_new_game(player_id="player-1")

    started = time.monotonic()
    state = service.submit_guess(game_id, "SATAY")

    assert time.monotonic() - started < 0.5
    assert state.won is True
    assert state.answer == "SATAY"
    assert state.reaction is None
    assert state.reaction_pending is True

    ai.release.set()
    threads[0].join(5)

    assert finished[0].reaction == "Shiok lah, well played!"
    assert finished[0].reaction_pending is False
    assert service.get_game_state(game_id).reaction == "Shiok lah, well played!"
    assert recording_players.saved == [("player-1", "SATAY", 1, True)]


def test_round_listener_receives_final_state(game_service):
    finished = []
    game_service.round_listeners.append(lambda game_id, state: finished.append((game_id, state)))
    game_id = game_service.create_new_game()
    game_service.submit_guess(game_id, "SATAY")

    assert len(finished) == 1
    assert finished[0][0] == game_id
    assert finished[0][1].reaction == "Shiok lah, well played!"


def test_saved_result_is_logged(game_service, monkeypatch):
    events = []
    monkeypatch.setattr(game_module.game_logger, "log_game_event",
                        lambda game_id, event, user_ip, **details: events.append((game_id, event, details)))
    game_id = game_service.create_new_game(player_id="player-1")
    game_service.submit_guess(game_id, "SATAY")

    assert events == [(game_id, "result_saved", {"player_id": "player-1", "attempts": 1, "won": True})]


def test_unsaved_result_is_not_logged_as_saved(satay_words, fake_ai, monkeypatch):
    events = []
    monkeypatch.setattr(game_module.game_logger, "log_game_event",
                        lambda game_id, event, user_ip, **details: events.append(event))
    service = GameService(satay_words, FailingSavePlayerService(), fake_ai, task_runner=run_inline)
    game_id = service.create_new_game(player_id="player-1")
    state = service.submit_guess(game_id, "SATAY")

    assert state.won is True
    assert events == []


def test_non_string_key_is_rejected(game_service):
    game_id = game_service.create_new_game()
    with pytest.raises(InvalidGuess):
        game_service.press_key(game_id, 5)
    assert game_service.get_game_state(game_id).current_guess == ""


def test_finished_round_rejects_before_validating_guess(game_service):
    game_id = game_service.create_new_game()
    game_service.submit_guess(game_id, "SATAY")

    with pytest.raises(RoundTerminated):
        game_service.submit_guess(game_id, "12345")
    with pytest.raises(RoundTerminated):
        game_service.submit_guess(game_id, None)


def test_stale_games_are_pruned(satay_words):
    now = [0.0]
    service = GameService(satay_words, task_runner=run_inline, game_ttl_seconds=60, clock=lambda: now[0])
    idle = service.create_new_game()
    active = service.create_new_game()

    now[0] = 50
    service.press_key(active, "S")
    now[0] = 70
    service.create_new_game()

    assert idle not in service.games
    assert active in service.games
    assert len(service.games) == 2
