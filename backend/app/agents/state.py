"""
Agent State
Defines the shared state structure for the LangGraph practice pipeline.
All agents read from and write to this state.
"""
from datetime import datetime
from typing import Optional, Literal
from typing_extensions import TypedDict


class UserState(TypedDict, total=False):
    """Learner the request is for"""
    user_id: str
    username: str
    name: str
    is_guest: bool
    registered: bool


class AttemptState(TypedDict, total=False):
    """A submitted attempt moving through scoring and scheduling"""
    attempt_id: str
    session_id: str
    exercise_id: str
    character_id: str
    accuracy: float
    time_spent_ms: int
    strokes: list[dict]
    stroke_summary: dict
    canvas_snapshot: Optional[str]
    difficulty_level: int
    exercise_type: str


class ProgressState(TypedDict, total=False):
    """Spaced repetition results for the request"""
    updated: Optional[dict]
    records: list[dict]
    recent_attempts: list[dict]
    stats: dict


class ProgressionRequestState(TypedDict, total=False):
    """Endless-mode selection input and output"""
    level: Optional[int]
    count: int
    character: Optional[str]
    accuracy: Optional[float]
    characters: list[str]
    exercises: list[dict]
    stats: dict
    level_advanced: bool
    character_completed: bool


class AgentMessage(TypedDict):
    """Message from an agent"""
    agent: str
    message: str
    timestamp: str
    data: Optional[dict]


class AppState(TypedDict, total=False):
    """
    Main application state shared across all agents.

    This TypedDict defines all possible state keys that agents can read/write.
    LangGraph uses this for state management between nodes.
    """

    # ==================== REQUEST CONTEXT ====================
    request_id: str
    request_type: Literal[
        "submit_attempt",
        "get_progress",
        "endless_exercises",
        "endless_result"
    ]
    timestamp: str

    # ==================== USER STATE ====================
    user: UserState

    # ==================== PIPELINE DATA ====================
    attempt: AttemptState
    progress: ProgressState
    progression: ProgressionRequestState

    # ==================== AGENT COORDINATION ====================
    route_decision: Optional[str]
    messages: list[AgentMessage]
    response: dict

    # ==================== CONTROL FLAGS ====================
    is_complete: bool
    has_error: bool
    error_message: Optional[str]
    error_status: int


def create_initial_state(
    username: Optional[str],
    request_type: str,
    input_data: dict | None = None,
    user_data: dict | None = None
) -> AppState:
    """
    Create initial state for a new request.

    Args:
        username: Learner username (None for anonymous endless mode)
        request_type: Type of request being made
        input_data: Request payload, split into the attempt/progression sections
        user_data: Stored user document, when already known

    Returns:
        Initialized AppState
    """
    now = datetime.utcnow()
    input_data = input_data or {}

    state: AppState = {
        # Request context
        "request_id": f"req_{username or 'anonymous'}_{now.timestamp()}",
        "request_type": request_type,
        "timestamp": now.isoformat(),

        # User state
        "user": {
            "user_id": username or "",
            "username": username or "",
            "name": username or "",
            "is_guest": username is None,
            "registered": False
        },

        # Pipeline data
        "attempt": {},
        "progress": {
            "updated": None,
            "records": [],
            "recent_attempts": [],
            "stats": {}
        },
        "progression": {
            "level": None,
            "count": 10,
            "character": None,
            "accuracy": None,
            "characters": [],
            "exercises": [],
            "stats": {},
            "level_advanced": False,
            "character_completed": False
        },

        # Agent coordination
        "route_decision": None,
        "messages": [],
        "response": {},

        # Control flags
        "is_complete": False,
        "has_error": False,
        "error_message": None,
        "error_status": 500
    }

    if user_data:
        state["user"].update({
            "user_id": user_data.get("id", state["user"]["user_id"]),
            "name": user_data.get("name") or state["user"]["name"],
            "is_guest": user_data.get("isGuest", False),
            "registered": True
        })

    if request_type == "submit_attempt":
        state["attempt"] = {
            "session_id": input_data.get("session_id"),
            "exercise_id": input_data.get("exercise_id"),
            "character_id": input_data.get("character_id"),
            "accuracy": input_data.get("accuracy"),
            "time_spent_ms": input_data.get("time_spent_ms", 0),
            "strokes": input_data.get("strokes", []),
            "canvas_snapshot": input_data.get("canvas_snapshot"),
            "difficulty_level": input_data.get("difficulty_level", 1),
            "exercise_type": input_data.get("exercise_type", "character")
        }
    elif request_type in ("endless_exercises", "endless_result"):
        for key in ("level", "count", "character", "accuracy"):
            if key in input_data:
                state["progression"][key] = input_data[key]

    return state


def add_agent_message(
    state: AppState,
    agent: str,
    message: str,
    data: dict | None = None
) -> AppState:
    """
    Add a message from an agent to the state.

    Args:
        state: Current state
        agent: Agent name
        message: Message text
        data: Optional additional data

    Returns:
        Updated state
    """
    msg: AgentMessage = {
        "agent": agent,
        "message": message,
        "timestamp": datetime.utcnow().isoformat(),
        "data": data
    }
    state["messages"].append(msg)
    return state
