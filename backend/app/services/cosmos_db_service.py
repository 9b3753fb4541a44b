"""
Azure Cosmos DB Service
Provides data persistence for users, reference characters and exercises,
practice sessions and attempts, spaced repetition progress and progression.
Per-user containers use the user id as partition key; reference data uses
the document id.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional
from azure.cosmos import CosmosClient, PartitionKey, exceptions

from app.config import settings

logger = logging.getLogger(__name__)


class CosmosDBService:
    """Service for Azure Cosmos DB operations"""

    def __init__(self):
        self._client: Optional[CosmosClient] = None
        self.database_name = settings.COSMOS_DB_DATABASE_NAME
        self.database = None
        self.containers = {}

        # Container names from settings
        self.container_names = {
            "users": settings.COSMOS_DB_USERS_CONTAINER,
            "characters": settings.COSMOS_DB_CHARACTERS_CONTAINER,
            "exercises": settings.COSMOS_DB_EXERCISES_CONTAINER,
            "sessions": settings.COSMOS_DB_SESSIONS_CONTAINER,
            "attempts": settings.COSMOS_DB_ATTEMPTS_CONTAINER,
            "user_progress": settings.COSMOS_DB_USER_PROGRESS_CONTAINER,
            "progression": settings.COSMOS_DB_PROGRESSION_CONTAINER
        }

    @property
    def client(self) -> CosmosClient:
        """Cosmos client, created on first use"""
        if self._client is None:
            self._client = CosmosClient(
                url=settings.COSMOS_DB_ENDPOINT,
                credential=settings.COSMOS_DB_KEY
            )
        return self._client

    async def initialize(self):
        """Initialize database and containers. Call on app startup."""
        try:
            # Create database if not exists
            self.database = self.client.create_database_if_not_exists(
                id=self.database_name
            )
            logger.info(f"Database '{self.database_name}' ready")

            # Create containers if not exist
            for key, container_name in self.container_names.items():
                container = self.database.create_container_if_not_exists(
                    id=container_name,
                    partition_key=PartitionKey(path="/partitionKey"),
                    offer_throughput=400  # Minimum RU/s
                )
                self.containers[key] = container
                logger.info(f"Container '{container_name}' ready")

            return True
        except Exception as e:
            logger.error(f"Cosmos DB initialization error: {e}")
            raise

    def _get_container(self, container_key: str):
        """Get a container by key."""
        if container_key not in self.containers:
            # Lazy initialization
            container_name = self.container_names.get(container_key)
            if not container_name:
                raise ValueError(f"Unknown container key: {container_key}")
            if not self.database:
                self.database = self.client.get_database_client(self.database_name)
            self.containers[container_key] = self.database.get_container_client(container_name)
        return self.containers[container_key]

    # ==================== GENERIC CRUD OPERATIONS ====================

    async def create_item(
        self,
        container_key: str,
        item: dict,
        partition_key: str
    ) -> dict:
        """Create a new item in a container."""
        try:
            container = self._get_container(container_key)
            item["partitionKey"] = partition_key
            item["createdAt"] = datetime.utcnow().isoformat()
            item["updatedAt"] = datetime.utcnow().isoformat()
            result = container.create_item(body=item)
            logger.debug(f"Created item in {container_key}: {item.get('id')}")
            return result
        except exceptions.CosmosResourceExistsError:
            logger.warning(f"Item already exists in {container_key}: {item.get('id')}")
            raise
        except Exception as e:
            logger.error(f"Create item error in {container_key}: {e}")
            raise

    async def get_item(
        self,
        container_key: str,
        item_id: str,
        partition_key: str
    ) -> Optional[dict]:
        """Get an item by ID and partition key."""
        try:
            container = self._get_container(container_key)
            return container.read_item(item=item_id, partition_key=partition_key)
        except exceptions.CosmosResourceNotFoundError:
            return None
        except Exception as e:
            logger.error(f"Get item error in {container_key}: {e}")
            raise

    async def update_item(
        self,
        container_key: str,
        item_id: str,
        partition_key: str,
        updates: dict
    ) -> dict:
        """Update an existing item."""
        try:
            container = self._get_container(container_key)
            item = container.read_item(item=item_id, partition_key=partition_key)
            item.update(updates)
            item["updatedAt"] = datetime.utcnow().isoformat()
            result = container.replace_item(item=item_id, body=item)
            logger.debug(f"Updated item in {container_key}: {item_id}")
            return result
        except Exception as e:
            logger.error(f"Update item error in {container_key}: {e}")
            raise

    async def upsert_item(
        self,
        container_key: str,
        item: dict,
        partition_key: str
    ) -> dict:
        """Create or update an item."""
        try:
            container = self._get_container(container_key)
            item["partitionKey"] = partition_key
            item["updatedAt"] = datetime.utcnow().isoformat()
            if "createdAt" not in item:
                item["createdAt"] = datetime.utcnow().isoformat()
            result = container.upsert_item(body=item)
            logger.debug(f"Upserted item in {container_key}: {item.get('id')}")
            return result
        except Exception as e:
            logger.error(f"Upsert item error in {container_key}: {e}")
            raise

    async def query_items(
        self,
        container_key: str,
        query: str,
        parameters: Optional[list] = None,
        partition_key: Optional[str] = None
    ) -> list:
        """Query items using SQL."""
        try:
            container = self._get_container(container_key)
            return list(container.query_items(
                query=query,
                parameters=parameters or [],
                partition_key=partition_key,
                enable_cross_partition_query=partition_key is None
            ))
        except Exception as e:
            logger.error(f"Query error in {container_key}: {e}")
            raise

    # ==================== USER OPERATIONS ====================

    async def get_user(self, user_id: str) -> Optional[dict]:
        """Get user by ID."""
        return await self.get_item("users", user_id, user_id)

    async def get_user_by_username(self, username: str) -> Optional[dict]:
        """Get user by unique username."""
        query = "SELECT * FROM c WHERE c.username = @username"
        parameters = [{"name": "@username", "value": username}]
        results = await self.query_items("users", query, parameters)
        return results[0] if results else None

    async def find_or_create_user(
        self,
        username: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        is_guest: bool = False
    ) -> dict:
        """
        Get a user by username, creating it when missing.

        The username doubles as the document id, so two concurrent creates
        collide and the loser re-reads the winner's document.
        """
        existing = await self.get_user(username)
        if existing:
            return existing

        user_data = {
            "id": username,
            "username": username,
            "name": name or username,
            "email": email,
            "isGuest": is_guest
        }
        try:
            return await self.create_item("users", user_data, username)
        except exceptions.CosmosResourceExistsError:
            return await self.get_user(username)

    # ==================== CHARACTERS & EXERCISES ====================

    async def get_character(self, character_id: str) -> Optional[dict]:
        """Get a character by ID."""
        return await self.get_item("characters", character_id, character_id)

    async def get_character_by_traditional(self, traditional: str) -> Optional[dict]:
        """Get a character by its traditional form."""
        query = "SELECT * FROM c WHERE c.traditional = @traditional"
        parameters = [{"name": "@traditional", "value": traditional}]
        results = await self.query_items("characters", query, parameters)
        return results[0] if results else None

    async def list_characters(self, traditional: Optional[list[str]] = None) -> list:
        """List characters, optionally restricted to the given forms."""
        if traditional:
            query = "SELECT * FROM c WHERE ARRAY_CONTAINS(@traditional, c.traditional)"
            parameters = [{"name": "@traditional", "value": traditional}]
            return await self.query_items("characters", query, parameters)
        return await self.query_items("characters", "SELECT * FROM c")

    async def list_exercises(self) -> list:
        """List all exercises, easiest first."""
        query = "SELECT * FROM c ORDER BY c.difficulty ASC"
        return await self.query_items("exercises", query)

    async def upsert_character(self, character_data: dict) -> dict:
        return await self.upsert_item("characters", character_data, character_data["id"])

    async def upsert_exercise(self, exercise_data: dict) -> dict:
        return await self.upsert_item("exercises", exercise_data, exercise_data["id"])

    # ==================== PRACTICE SESSIONS ====================

    async def get_session(self, user_id: str, session_id: str) -> Optional[dict]:
        """Get a practice session by ID."""
        return await self.get_item("sessions", session_id, user_id)

    async def get_or_create_session(self, user_id: str, session_id: str) -> dict:
        """Get a session by its client-generated id, creating it when missing."""
        existing = await self.get_session(user_id, session_id)
        if existing:
            return existing

        session_data = {
            "id": session_id,
            "userId": user_id,
            "currentExerciseIndex": 0,
            "currentCharacterIndex": 0,
            "overallAccuracy": 0,
            "totalTimeSpent": 0,
            "completed": False,
            "startedAt": datetime.utcnow().isoformat()
        }
        try:
            return await self.create_item("sessions", session_data, user_id)
        except exceptions.CosmosResourceExistsError:
            return await self.get_session(user_id, session_id)

    async def save_session(self, user_id: str, session_data: dict) -> dict:
        """Create or replace a practice session document."""
        session_data["userId"] = user_id
        return await self.upsert_item("sessions", session_data, user_id)

    async def update_session_stats(self, user_id: str, session_id: str) -> Optional[dict]:
        """Recompute a session's overall accuracy and total time from its attempts."""
        attempts = await self.get_session_attempts(user_id, session_id)
        if not attempts:
            return None

        updates = {
            "overallAccuracy": sum(a.get("accuracy", 0) for a in attempts) / len(attempts),
            "totalTimeSpent": sum(a.get("timeSpent", 0) for a in attempts)
        }
        return await self.update_item("sessions", session_id, user_id, updates)

    # ==================== PRACTICE ATTEMPTS ====================

    async def create_attempt(self, user_id: str, attempt_data: dict) -> dict:
        """Store a practice attempt."""
        attempt_data["id"] = attempt_data.get("id") or str(uuid.uuid4())
        attempt_data["userId"] = user_id
        return await self.create_item("attempts", attempt_data, user_id)

    async def get_attempts(
        self,
        user_id: str,
        character_id: Optional[str] = None,
        limit: int = 50
    ) -> list:
        """Get a user's attempts, newest first."""
        if character_id:
            query = """
                SELECT * FROM c
                WHERE c.partitionKey = @user_id
                AND c.characterId = @character_id
                ORDER BY c.attemptedAt DESC
                OFFSET 0 LIMIT @limit
            """
            parameters = [
                {"name": "@user_id", "value": user_id},
                {"name": "@character_id", "value": character_id},
                {"name": "@limit", "value": limit}
            ]
        else:
            query = """
                SELECT * FROM c
                WHERE c.partitionKey = @user_id
                ORDER BY c.attemptedAt DESC
                OFFSET 0 LIMIT @limit
            """
            parameters = [
                {"name": "@user_id", "value": user_id},
                {"name": "@limit", "value": limit}
            ]
        return await self.query_items("attempts", query, parameters, user_id)

    async def get_session_attempts(self, user_id: str, session_id: str) -> list:
        """Get all attempts recorded in one session."""
        query = """
            SELECT * FROM c
            WHERE c.partitionKey = @user_id
            AND c.sessionId = @session_id
        """
        parameters = [
            {"name": "@user_id", "value": user_id},
            {"name": "@session_id", "value": session_id}
        ]
        return await self.query_items("attempts", query, parameters, user_id)

    async def get_attempt_totals(self, user_id: str) -> dict:
        """Attempt count and mean accuracy over all of a user's attempts."""
        query = """
            SELECT COUNT(1) AS total, AVG(c.accuracy) AS average
            FROM c
            WHERE c.partitionKey = @user_id
        """
        parameters = [{"name": "@user_id", "value": user_id}]
        results = await self.query_items("attempts", query, parameters, user_id)
        row = results[0] if results else {}
        return {
            "total_attempts": row.get("total") or 0,
            "average_accuracy": row.get("average") or 0.0
        }

    # ==================== USER PROGRESS ====================

    async def get_user_progress(
        self,
        user_id: str,
        character_id: Optional[str] = None
    ) -> list | dict | None:
        """Get one character's progress, or all progress for a user (latest first)."""
        if character_id:
            item_id = f"progress_{user_id}_{character_id}"
            return await self.get_item("user_progress", item_id, user_id)

        query = """
            SELECT * FROM c
            WHERE c.partitionKey = @user_id
            ORDER BY c.lastPracticed DESC
        """
        parameters = [{"name": "@user_id", "value": user_id}]
        return await self.query_items("user_progress", query, parameters, user_id)

    async def upsert_user_progress(
        self,
        user_id: str,
        character_id: str,
        progress_data: dict
    ) -> dict:
        """Update or create the progress record for a character."""
        progress_data["id"] = f"progress_{user_id}_{character_id}"
        progress_data["userId"] = user_id
        progress_data["characterId"] = character_id
        return await self.upsert_item("user_progress", progress_data, user_id)

    async def get_progress_due_for_review(self, user_id: str) -> list:
        """Get progress records whose next review has passed."""
        now = datetime.utcnow().isoformat()
        query = """
            SELECT * FROM c
            WHERE c.partitionKey = @user_id
            AND c.nextReview <= @now
            ORDER BY c.nextReview ASC
        """
        parameters = [
            {"name": "@user_id", "value": user_id},
            {"name": "@now", "value": now}
        ]
        return await self.query_items("user_progress", query, parameters, user_id)

    # ==================== PROGRESSION ====================

    async def get_progression_state(self, user_id: str) -> Optional[dict]:
        """Get a user's endless-mode progression state."""
        return await self.get_item("progression", f"progression_{user_id}", user_id)

    async def save_progression_state(self, user_id: str, state_data: dict) -> dict:
        """Persist a user's endless-mode progression state."""
        state_data["id"] = f"progression_{user_id}"
        state_data["userId"] = user_id
        return await self.upsert_item("progression", state_data, user_id)


# Singleton instance
cosmos_db_service = CosmosDBService()
