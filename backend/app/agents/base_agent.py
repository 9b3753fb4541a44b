"""
Base Agent
Abstract base class for all agents in the practice pipeline.
Provides common interface, logging, and service access.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar, Generic

from app.config import Settings, get_settings
from app.services.cosmos_db_service import CosmosDBService, cosmos_db_service


# Type variable for agent state
StateT = TypeVar("StateT")


class BaseAgent(ABC, Generic[StateT]):
    """
    Abstract base class for all agents.

    Each agent should:
    - Handle one step of the pipeline (scoring, scheduling, etc.)
    - Read and write persistence through the Cosmos DB service
    - Log its operations for debugging
    - Return updates to the shared state
    """

    def __init__(
        self,
        settings: Settings | None = None,
        db_service: CosmosDBService | None = None
    ):
        """
        Initialize base agent with services.

        Args:
            settings: Application settings (uses singleton if not provided)
            db_service: Cosmos DB service (uses singleton if not provided)
        """
        self.settings = settings or get_settings()
        self.db_service = db_service or cosmos_db_service

        # Setup logging for this agent
        self.logger = logging.getLogger(f"agent.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent name for logging and identification"""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Agent description for documentation"""
        pass

    @abstractmethod
    async def process(self, state: StateT) -> StateT:
        """
        Process the current state and return updated state.

        Args:
            state: Current shared state

        Returns:
            Updated state with agent's modifications
        """
        pass

    def fail(self, state: StateT, error: Exception, status_code: int = 500) -> StateT:
        """
        Record a failure on the shared state.

        The endpoint layer turns ``error_status`` into the HTTP status code.
        """
        self.log_error(error)
        state["has_error"] = True
        state["error_message"] = f"{self.name.capitalize()} error: {str(error)}"
        state["error_status"] = status_code
        return state

    def log_start(self, context: dict | None = None) -> None:
        """Log agent starting to process"""
        msg = f"[{self.name}] Starting processing"
        if context:
            msg += f" - Context: {context}"
        self.logger.info(msg)

    def log_complete(self, result: Any = None) -> None:
        """Log agent completed processing"""
        msg = f"[{self.name}] Processing complete"
        if result:
            msg += f" - Result: {result}"
        self.logger.info(msg)

    def log_error(self, error: Exception, context: dict | None = None) -> None:
        """Log agent error"""
        msg = f"[{self.name}] Error: {str(error)}"
        if context:
            msg += f" - Context: {context}"
        self.logger.error(msg, exc_info=True)

    def log_debug(self, message: str, data: Any = None) -> None:
        """Log debug information"""
        msg = f"[{self.name}] {message}"
        if data:
            msg += f" - Data: {data}"
        self.logger.debug(msg)
