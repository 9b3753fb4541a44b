"""
Exercises API Endpoints
REST API for the exercise catalogue and endless mode.
"""
import random
from itertools import groupby
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
import logging

from app.agents.orchestrator import run_orchestrator
from app.models.character import Character
from app.models.exercise import Exercise
from app.schemas.exercises import (
    EndlessExercisesResponse,
    EndlessResultRequest,
    EndlessResultResponse,
    ExerciseListResponse
)
from app.services.cosmos_db_service import cosmos_db_service


logger = logging.getLogger(__name__)

router = APIRouter()


async def load_exercises(exercise_ids: Optional[list[str]] = None) -> list[Exercise]:
    """
    Load exercises with their characters resolved, easiest first.

    Exercises of the same difficulty are shuffled; with ``exercise_ids`` the
    given order is kept instead.
    """
    documents = await cosmos_db_service.list_exercises()
    characters = {
        document["id"]: Character.from_dict(document)
        for document in await cosmos_db_service.list_characters()
    }
    exercises = [Exercise.from_dict(document, characters) for document in documents]

    if exercise_ids is not None:
        by_id = {exercise.id: exercise for exercise in exercises}
        return [by_id[exercise_id] for exercise_id in exercise_ids if exercise_id in by_id]

    ordered: list[Exercise] = []
    exercises.sort(key=lambda exercise: exercise.difficulty)
    for _, group in groupby(exercises, key=lambda exercise: exercise.difficulty):
        level = list(group)
        random.shuffle(level)
        ordered.extend(level)
    return ordered


def raise_for_state(state: dict, failure_message: str):
    """Map an agent error on the final state to an HTTP error."""
    if not state.get("has_error"):
        return
    status_code = state.get("error_status", 500)
    logger.error(f"{failure_message}: {state.get('error_message')}")
    raise HTTPException(
        status_code=status_code,
        detail=state.get("error_message") if status_code < 500 else failure_message
    )


@router.get("", response_model=ExerciseListResponse)
async def list_exercises():
    """
    Get all exercises grouped by ascending difficulty.

    Each exercise carries its characters in writing order, with stroke
    templates.
    """
    try:
        exercises = await load_exercises()
        return ExerciseListResponse(exercises=exercises, total=len(exercises))
    except Exception as e:
        logger.error(f"Error fetching exercises: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch exercises")


@router.get("/endless", response_model=EndlessExercisesResponse)
async def get_endless_exercises(
    level: int = Query(default=1, ge=1, le=5, description="Starting level for new or anonymous learners"),
    count: int = Query(default=20, ge=1, le=50),
    username: Optional[str] = Query(default=None, description="Use this learner's progression")
):
    """
    Generate a fresh, shuffled batch of single-character exercises.

    Characters come from the learner's current progression level; the
    response always reports ``has_more``.
    """
    try:
        state = await run_orchestrator(
            username=username,
            request_type="endless_exercises",
            input_data={"level": level, "count": count}
        )
    except Exception as e:
        logger.error(f"Error generating endless exercises: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate exercises")

    raise_for_state(state, "Failed to generate exercises")

    response = state.get("response", {})
    return EndlessExercisesResponse(
        exercises=response.get("exercises", []),
        progression=response["progression"],
        has_more=response.get("has_more", True),
        total_available=response.get("total_available", 0)
    )


@router.post("/endless", response_model=EndlessResultResponse)
async def record_endless_result(request: EndlessResultRequest):
    """
    Record an endless-mode result.

    Marks the character mastered when the accuracy is high enough, advances
    the level when possible and reports whether it did.
    """
    try:
        state = await run_orchestrator(
            username=request.username,
            request_type="endless_result",
            input_data={"character": request.character, "accuracy": request.accuracy}
        )
    except Exception as e:
        logger.error(f"Error updating progression: {e}")
        raise HTTPException(status_code=500, detail="Failed to update progression")

    raise_for_state(state, "Failed to update progression")

    response = state.get("response", {})
    return EndlessResultResponse(
        success=response.get("success", True),
        character_completed=response.get("character_completed", False),
        level_advanced=response.get("level_advanced", False),
        progression=response["progression"],
        progress=response.get("progress")
    )
