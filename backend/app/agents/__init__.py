"""
Agents Module
LangGraph pipeline for the stroke practice backend.

This module contains:
- Base agent class
- Shared state definition
- Agents for each pipeline step
- Orchestrator for coordinating all agents

Available Agents:
- Orchestrator: Central coordinator using LangGraph
- Scoring: Stores attempts with their stroke geometry summary
- Scheduler: Spaced repetition updates after an attempt
- Progress: Dashboard statistics
- Progression: Endless-mode character selection and level advancement
"""

# Base classes
from app.agents.base_agent import BaseAgent

# Shared state
from app.agents.state import (
    AppState,
    UserState,
    AttemptState,
    ProgressState,
    ProgressionRequestState,
    AgentMessage,
    create_initial_state,
    add_agent_message
)

# Pipeline agents
from app.agents.scoring_agent import (
    ScoringAgent,
    scoring_agent
)

from app.agents.scheduler_agent import (
    SchedulerAgent,
    scheduler_agent
)

from app.agents.progress_agent import (
    ProgressAgent,
    progress_agent
)

from app.agents.progression_agent import (
    ProgressionAgent,
    progression_agent
)

# Orchestrator
from app.agents.orchestrator import (
    Orchestrator,
    orchestrator,
    run_orchestrator
)


__all__ = [
    # Base classes
    "BaseAgent",

    # State types
    "AppState",
    "UserState",
    "AttemptState",
    "ProgressState",
    "ProgressionRequestState",
    "AgentMessage",

    # State utilities
    "create_initial_state",
    "add_agent_message",

    # Agents
    "ScoringAgent",
    "scoring_agent",
    "SchedulerAgent",
    "scheduler_agent",
    "ProgressAgent",
    "progress_agent",
    "ProgressionAgent",
    "progression_agent",
    "Orchestrator",
    "orchestrator",

    # Convenience functions
    "run_orchestrator"
]
