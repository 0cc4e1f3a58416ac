"""
Player Service

Handles nickname-only player profiles, player tokens and persistence of
finished rounds, using MongoDB for data storage. There are no passwords:
a nickname is the whole identity.
"""

import datetime
import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

import jwt
from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..models.player import GameResult, Player

logger = logging.getLogger(__name__)

MIN_NICKNAME_LENGTH = 3
MAX_NICKNAME_LENGTH = 15


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class PlayerService:
    """
    Player profile service for registration, lookup, tokens and results.
    """

    def __init__(self, db, jwt_secret: str, jwt_expiration_days: int = 30):
        """
        Initialize the player service on top of a MongoDB database.

        Args:
            db: pymongo Database holding the ``players`` and ``game_results`` collections
            jwt_secret: Secret key for player token generation
            jwt_expiration_days: Lifetime of a player token
        """
        self.db = db
        self.jwt_secret = jwt_secret
        self.jwt_expiration_days = jwt_expiration_days
        self.players_collection = db.players
        self.results_collection = db.game_results

        # Nicknames are unique regardless of case
        self.players_collection.create_index("nickname_key", unique=True)
        self.results_collection.create_index("player_id")

    @classmethod
    def connect(cls, mongo_uri: str, db_name: str, jwt_secret: str,
                jwt_expiration_days: int = 30) -> 'PlayerService':
        """Create a service with its own MongoDB client."""
        client = MongoClient(mongo_uri, server_api=ServerApi('1'))

        # Test connection
        try:
            client.admin.command('ping')
            logger.info("Successfully connected to MongoDB!")
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            raise

        service = cls(client[db_name], jwt_secret, jwt_expiration_days)
        service.client = client
        return service

    @staticmethod
    def _serialize_player(doc: Dict[str, Any]) -> Dict[str, Any]:
        player = Player(id=str(doc["_id"]), nickname=doc["nickname"], created_at=doc.get("created_at"))
        return {
            "id": player.id,
            "nickname": player.nickname,
            "created_at": player.created_at.isoformat() if player.created_at else None,
        }

    def _issue_token(self, player: Dict[str, Any]) -> str:
        token_payload = {
            "player_id": str(player["_id"]),
            "nickname": player["nickname"],
            "exp": _utcnow() + datetime.timedelta(days=self.jwt_expiration_days)
        }
        return jwt.encode(token_payload, self.jwt_secret, algorithm="HS256")

    def validate_nickname(self, nickname: Optional[str]) -> Optional[str]:
        """Return an error message for an unusable nickname, None if it is fine."""
        if not nickname or not nickname.strip():
            return "Please enter a nickname"

        nickname = nickname.strip()
        if len(nickname) < MIN_NICKNAME_LENGTH:
            return f"Nickname must be at least {MIN_NICKNAME_LENGTH} characters"
        if len(nickname) > MAX_NICKNAME_LENGTH:
            return f"Nickname must be {MAX_NICKNAME_LENGTH} characters or less"
        return None

    def create_player(self, nickname: Optional[str]) -> Dict[str, Any]:
        """
        Create a new player profile.

        Args:
            nickname: Chosen nickname

        Returns:
            Dictionary with success status and the player plus token, or error
        """
        error = self.validate_nickname(nickname)
        if error:
            return {"success": False, "error": error}

        nickname = nickname.strip()
        nickname_key = nickname.lower()

        try:
            if self.players_collection.find_one({"nickname_key": nickname_key}):
                return {"success": False, "error": "This nickname is already taken. Try another!"}

            player_doc = {
                "nickname": nickname,
                "nickname_key": nickname_key,
                "created_at": _utcnow(),
            }
            result = self.players_collection.insert_one(player_doc)
            player_doc["_id"] = result.inserted_id

        except DuplicateKeyError:
            return {"success": False, "error": "This nickname is already taken. Try another!"}
        except PyMongoError as e:
            logger.error(f"Database error creating player '{nickname}': {e}")
            return {"success": False, "error": f"Database error: {e}"}

        return {
            "success": True,
            "token": self._issue_token(player_doc),
            "player": self._serialize_player(player_doc)
        }

    def login_player(self, nickname: Optional[str]) -> Dict[str, Any]:
        """
        Look up an existing player by nickname, ignoring case.

        Returns:
            Dictionary with success status and the player plus token, or error
        """
        if not nickname or not nickname.strip():
            return {"success": False, "error": "Please enter your nickname"}

        try:
            player = self.players_collection.find_one({"nickname_key": nickname.strip().lower()})
        except PyMongoError as e:
            logger.error(f"Database error looking up player '{nickname}': {e}")
            return {"success": False, "error": f"Database error: {e}"}

        if not player:
            return {
                "success": False,
                "error": "Nickname not found. Check spelling or create a new profile."
            }

        return {
            "success": True,
            "token": self._issue_token(player),
            "player": self._serialize_player(player)
        }

    def verify_token(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Verify and decode a player token.

        Returns:
            Dictionary with success status and player data or error
        """
        if not token:
            return {"success": False, "error": "Token is required"}

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}

        player_id = payload.get("player_id")
        if not player_id:
            return {"success": False, "error": "Invalid token payload"}

        try:
            player = self.get_player_by_id(player_id)
        except PyMongoError as e:
            logger.error(f"Database error verifying player {player_id}: {e}")
            return {"success": False, "error": f"Database error: {e}", "database_error": True}

        if not player:
            return {"success": False, "error": "Player not found"}

        return {"success": True, "player": player}

    def get_player_by_id(self, player_id: str) -> Optional[Dict[str, Any]]:
        """
        Get player data by id, None if it does not exist.

        Raises:
            PyMongoError: If the lookup itself fails
        """
        try:
            player = self.players_collection.find_one({"_id": ObjectId(player_id)})
        except (InvalidId, TypeError):
            return None
        return self._serialize_player(player) if player else None

    def save_game_result(self, player_id: str, word: str, attempts: int, won: bool) -> bool:
        """
        Persist one finished round.

        Returns:
            True if the result was stored, False otherwise
        """
        try:
            result = GameResult(player_id=player_id, word=word, attempts=attempts, won=won, played_at=_utcnow())
            doc = asdict(result)
            doc.pop("id")
            self.results_collection.insert_one(doc)
            return True
        except PyMongoError as e:
            logger.error(f"Failed to save game result for player {player_id}: {e}")
            return False

    def list_players(self) -> List[Dict[str, Any]]:
        """All players as id and nickname. Raises PyMongoError on storage failure."""
        return [
            {"id": str(doc["_id"]), "nickname": doc["nickname"]}
            for doc in self.players_collection.find({}, {"nickname": 1})
        ]

    def list_results(self, player_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Stored results, optionally for one player. Raises PyMongoError on storage failure."""
        query = {"player_id": player_id} if player_id else {}
        return list(self.results_collection.find(query, {"player_id": 1, "won": 1, "attempts": 1}))

    def get_player_stats(self, player_id: str) -> Dict[str, Any]:
        """Aggregate stored results for a single player."""
        results = self.list_results(player_id)
        played = len(results)
        won = sum(1 for result in results if result.get("won"))
        return {
            "games_played": played,
            "games_won": won,
            "win_rate": int(won / played * 100 + 0.5) if played else 0,
        }

    def get_players_count(self) -> int:
        try:
            return self.players_collection.count_documents({})
        except PyMongoError:
            return 0

    def close_connection(self):
        """Close the MongoDB connection."""
        client = getattr(self, 'client', None)
        if client:
            client.close()


# Global service instance
_player_service = None


def get_player_service() -> Optional[PlayerService]:
    """Get the global player service instance."""
    return _player_service


def set_player_service(service: Optional[PlayerService]) -> Optional[PlayerService]:
    """Install an already-built player service as the global instance."""
    global _player_service
    _player_service = service
    return _player_service


def initialize_player_service(mongo_uri: str, db_name: str, jwt_secret: str,
                              jwt_expiration_days: int = 30) -> Optional[PlayerService]:
    """Initialize the global player service instance."""
    global _player_service
    try:
        _player_service = PlayerService.connect(mongo_uri, db_name, jwt_secret, jwt_expiration_days)
        return _player_service
    except PyMongoError as e:
        logger.error(f"Failed to initialize player service: {e}")
        _player_service = None
        return None
