import os
import tempfile

# Keep test logs out of the working tree; must happen before guesssg is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='guesssg-logs-'))

import pytest
import requests
from bson.objectid import ObjectId

from guesssg import create_app
from guesssg.config import TestingConfig
from guesssg.services import ai_service as ai_module
from guesssg.services.ai_service import initialize_ai_service
from guesssg.services.game_service import GameService, initialize_game_service
from guesssg.services.leaderboard_service import initialize_leaderboard_service
from guesssg.services.player_service import PlayerService, set_player_service
from guesssg.services.word_service import WordService, initialize_word_service


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCollection:
    """Just enough of a pymongo collection for equality queries."""

    def __init__(self):
        self.docs = []

    def create_index(self, *args, **kwargs):
        return 'index'

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(key) == value for key, value in (query or {}).items())

    def find_one(self, query=None):
        for doc in self.docs:
            if self._matches(doc, query):
                return dict(doc)
        return None

    def find(self, query=None, projection=None):
        return [dict(doc) for doc in self.docs if self._matches(doc, query)]

    def insert_one(self, doc):
        doc.setdefault('_id', ObjectId())
        self.docs.append(dict(doc))
        return FakeInsertResult(doc['_id'])

    def count_documents(self, query):
        return len(self.find(query))


class FakeDatabase:
    def __init__(self):
        self.players = FakeCollection()
        self.game_results = FakeCollection()


class FakeAI:
    """Stands in for the Perplexity client in service tests."""

    def __init__(self, reply="Shiok lah, well played!"):
        self.reply = reply
        self.calls = []

    def is_configured(self):
        return True

    def generate(self, ai_type, word, category, hint=None, guess_number=None, won=None, user_message=None):
        self.calls.append({
            'type': ai_type, 'word': word, 'category': category, 'hint': hint,
            'guess_number': guess_number, 'won': won, 'user_message': user_message
        })
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class RecordingPlayerService:
    """Collects saved results without any storage."""

    def __init__(self):
        self.saved = []

    def save_game_result(self, player_id, word, attempts, won):
        self.saved.append((player_id, word, attempts, won))
        return True


def run_inline(task, *args):
    """Task runner that finishes end-of-round work before returning."""
    task(*args)


@pytest.fixture(autouse=True)
def reset_global_services():
    yield
    ai_module._ai_service = None
    set_player_service(None)


def make_entry(word, category="food", hint="A test hint", emoji="🍜"):
    return {"word": word, "hint": hint, "category": category, "emoji": emoji}


@pytest.fixture()
def satay_words():
    return WordService([make_entry("SATAY")])


@pytest.fixture()
def fake_ai():
    return FakeAI()


@pytest.fixture()
def recording_players():
    return RecordingPlayerService()


@pytest.fixture()
def game_service(satay_words, recording_players, fake_ai):
    return GameService(satay_words, recording_players, fake_ai, task_runner=run_inline)


@pytest.fixture()
def fake_db():
    return FakeDatabase()


@pytest.fixture()
def player_service(fake_db):
    return PlayerService(fake_db, TestingConfig.JWT_SECRET)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.payload


def completion(content):
    return {"choices": [{"message": {"content": content}}]}


@pytest.fixture()
def ai_service(monkeypatch):
    service = initialize_ai_service('test-key')
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({'url': url, 'json': json, 'headers': headers, 'timeout': timeout})
        return FakeResponse(completion("Wah, steady lah!"))

    monkeypatch.setattr(service.session, 'post', fake_post)
    service.calls = calls
    return service


@pytest.fixture()
def flask_app(player_service, ai_service):
    word_service = initialize_word_service([
        make_entry("SATAY"),
    ])
    set_player_service(player_service)
    initialize_game_service(word_service, player_service, ai_service, task_runner=run_inline)
    initialize_leaderboard_service(player_service)

    application, socketio = create_app(TestingConfig)
    application.test_socketio = socketio
    return application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = flask_app.test_socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()
