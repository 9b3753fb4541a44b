"""
Orchestrator Agent
Central coordinator for the practice pipeline using LangGraph.

Responsibilities:
- Route requests to the appropriate agents
- Chain scoring and scheduling for attempt submission
- Chain progression and scheduling for endless-mode results
- Stop early when an agent reports an error
"""
import logging
from typing import Literal
from datetime import datetime

from langgraph.graph import StateGraph, END

from app.agents.base_agent import BaseAgent
from app.agents.state import AppState, create_initial_state, add_agent_message
from app.agents.scoring_agent import scoring_agent
from app.agents.scheduler_agent import scheduler_agent
from app.agents.progress_agent import progress_agent
from app.agents.progression_agent import progression_agent
from app.config import Settings
from app.services.cosmos_db_service import cosmos_db_service


logger = logging.getLogger(__name__)


# Define route types for type safety
RouteType = Literal[
    "scoring",
    "scheduler",
    "progress",
    "progression",
    "complete"
]


class Orchestrator(BaseAgent[AppState]):
    """
    Orchestrator Agent - Central coordinator for all agents.

    Uses LangGraph to define agent workflows and manage state
    transitions between agents.
    """

    def __init__(self, settings: Settings | None = None):
        super().__init__(settings=settings)
        self.graph = self._build_graph()
        self.compiled_graph = self.graph.compile()

    @property
    def name(self) -> str:
        return "orchestrator"

    @property
    def description(self) -> str:
        return "Coordinates all agents and manages workflow execution"

    def _build_graph(self) -> StateGraph:
        """
        Build the LangGraph workflow.

        Graph structure:
        START -> router -> scoring -> scheduler -> finalize -> END
                        -> progression [-> scheduler] -> finalize
                        -> progress -> finalize
        """
        graph = StateGraph(AppState)

        graph.add_node("router", self._router_node)
        graph.add_node("scoring", self._scoring_node)
        graph.add_node("scheduler", self._scheduler_node)
        graph.add_node("progress", self._progress_node)
        graph.add_node("progression", self._progression_node)
        graph.add_node("finalize", self._finalize_node)

        graph.set_entry_point("router")

        graph.add_conditional_edges(
            "router",
            self._route_decision,
            {
                "scoring": "scoring",
                "progress": "progress",
                "progression": "progression",
                "complete": "finalize"
            }
        )

        # Scoring stores the attempt, scheduling then updates progress
        graph.add_conditional_edges(
            "scoring",
            self._post_scoring_route,
            {
                "scheduler": "scheduler",
                "complete": "finalize"
            }
        )

        # Endless results update spaced repetition for known characters
        graph.add_conditional_edges(
            "progression",
            self._post_progression_route,
            {
                "scheduler": "scheduler",
                "complete": "finalize"
            }
        )

        graph.add_edge("scheduler", "finalize")
        graph.add_edge("progress", "finalize")
        graph.add_edge("finalize", END)

        return graph

    async def process(self, state: AppState) -> AppState:
        """
        Process a request through the agent workflow.

        This is the main entry point for the orchestrator.
        """
        self.log_start({
            "request_type": state.get("request_type"),
            "user_id": state["user"]["user_id"]
        })

        try:
            final_state = await self.compiled_graph.ainvoke(state)

            self.log_complete({
                "is_complete": final_state.get("is_complete"),
                "has_error": final_state.get("has_error")
            })

            return final_state

        except Exception as e:
            self.log_error(e)
            state["has_error"] = True
            state["error_message"] = f"Orchestrator error: {str(e)}"
            state["error_status"] = 500
            state["is_complete"] = True
            return state

    async def run(
        self,
        username: str | None,
        request_type: str,
        input_data: dict | None = None
    ) -> AppState:
        """
        Run the orchestrator with a new request.

        Args:
            username: Learner making the request (None for anonymous endless mode)
            request_type: Type of request
            input_data: Request payload

        Returns:
            Final state after processing
        """
        user_data = None
        if username and request_type != "submit_attempt":
            user_data = await cosmos_db_service.get_user_by_username(username)

        state = create_initial_state(username, request_type, input_data, user_data)
        return await self.process(state)

    # ==================== ROUTER NODE ====================

    async def _router_node(self, state: AppState) -> AppState:
        """
        Router node - decides which agent to invoke.
        """
        self.log_debug("Router processing", {"request_type": state.get("request_type")})

        request_type = state.get("request_type", "")

        if request_type == "submit_attempt":
            state["route_decision"] = "scoring"

        elif request_type == "get_progress":
            state["route_decision"] = "progress"

        elif request_type in ["endless_exercises", "endless_result"]:
            state["route_decision"] = "progression"

        else:
            # Unknown request - go to complete
            state["route_decision"] = "complete"
            state["response"] = {
                "error": f"Unknown request type: {request_type}"
            }

        state = add_agent_message(
            state,
            self.name,
            f"Routing to: {state['route_decision']}"
        )

        return state

    def _route_decision(self, state: AppState) -> RouteType:
        """Get routing decision from state"""
        return state.get("route_decision", "complete")

    # ==================== AGENT NODES ====================

    async def _scoring_node(self, state: AppState) -> AppState:
        self.log_debug("Scoring node processing")
        return await scoring_agent.process(state)

    async def _scheduler_node(self, state: AppState) -> AppState:
        self.log_debug("Scheduler node processing")
        return await scheduler_agent.process(state)

    async def _progress_node(self, state: AppState) -> AppState:
        self.log_debug("Progress node processing")
        return await progress_agent.process(state)

    async def _progression_node(self, state: AppState) -> AppState:
        self.log_debug("Progression node processing")
        return await progression_agent.process(state)

    async def _finalize_node(self, state: AppState) -> AppState:
        """
        Finalize node - prepare final response.

        Marks processing as complete and stamps the response.
        """
        self.log_debug("Finalize node processing")

        state["is_complete"] = True

        if "response" in state:
            state["response"]["timestamp"] = datetime.utcnow().isoformat()
            state["response"]["request_id"] = state.get("request_id")

        state = add_agent_message(
            state,
            self.name,
            "Processing complete"
        )

        return state

    # ==================== CONDITIONAL ROUTING ====================

    def _post_scoring_route(self, state: AppState) -> Literal["scheduler", "complete"]:
        """Route after scoring node"""
        if state.get("has_error"):
            return "complete"
        return "scheduler"

    def _post_progression_route(self, state: AppState) -> Literal["scheduler", "complete"]:
        """Route after progression node"""
        if state.get("has_error"):
            return "complete"
        if state.get("request_type") == "endless_result" and state.get("attempt", {}).get("character_id"):
            return "scheduler"
        return "complete"


# Singleton instance
orchestrator = Orchestrator()


# Convenience function to run orchestrator
async def run_orchestrator(
    username: str | None,
    request_type: str,
    input_data: dict | None = None
) -> AppState:
    """
    Run the orchestrator with a request.

    Args:
        username: Learner making the request
        request_type: Type of request (e.g., "submit_attempt", "get_progress")
        input_data: Additional input data for the request

    Returns:
        Final state with response

    Example:
        >>> state = await run_orchestrator(
        ...     username="learner",
        ...     request_type="get_progress"
        ... )
        >>> print(state["response"])
    """
    return await orchestrator.run(username, request_type, input_data)
