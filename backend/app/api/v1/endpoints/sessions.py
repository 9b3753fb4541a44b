"""
Practice Sessions API Endpoints
REST API for driving an in-progress practice session: drawing strokes,
navigating between characters and exercises, and ending the session.
Open sessions live in memory and are autosaved after a short idle period.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException
import logging

from app.agents.orchestrator import run_orchestrator
from app.api.v1.endpoints.exercises import load_exercises, raise_for_state
from app.models.exercise import Exercise
from app.models.practice import PracticeSession
from app.schemas.sessions import (
    AddStrokeRequest,
    NavigationResponse,
    SessionStartRequest,
    SessionStateResponse
)
from app.services.cosmos_db_service import cosmos_db_service
from app.services.practice_session import (
    AttemptAutosaver,
    PracticeSessionTracker,
    session_registry
)


logger = logging.getLogger(__name__)

router = APIRouter()

ENDLESS_BATCH_SIZE = 10


# ==================== HELPERS ====================

def make_autosaver(user_id: str) -> AttemptAutosaver:
    async def save(session: PracticeSession):
        await cosmos_db_service.save_session(user_id, session.to_dict())

    return AttemptAutosaver(save)


def get_tracker(session_id: str) -> PracticeSessionTracker:
    tracker = session_registry.get(session_id)
    if tracker is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return tracker


def to_state(tracker: PracticeSessionTracker) -> SessionStateResponse:
    session = tracker.session
    return SessionStateResponse(
        session_id=session.id,
        user_id=session.user_id,
        is_active=tracker.is_active,
        endless_mode=session.endless_mode,
        completed=session.completed,
        current_exercise_index=session.current_exercise_index,
        current_character_index=session.current_character_index,
        total_exercises=len(session.exercises),
        current_exercise=tracker.current_exercise,
        current_character=tracker.current_character,
        current_attempt=tracker.current_attempt,
        session_progress=tracker.session_progress,
        exercise_progress=tracker.exercise_progress,
        overall_accuracy=tracker.overall_accuracy(),
        total_time_spent=session.total_time_spent,
        attempt_count=len(session.attempts)
    )


async def fetch_endless_exercises(
    username: Optional[str],
    count: int,
    level: Optional[int] = None
) -> list[Exercise]:
    state = await run_orchestrator(
        username=username,
        request_type="endless_exercises",
        input_data={"level": level or 1, "count": count}
    )
    raise_for_state(state, "Failed to generate exercises")
    return [
        Exercise.model_validate(exercise)
        for exercise in state.get("response", {}).get("exercises", [])
    ]


def username_of(tracker: PracticeSessionTracker) -> Optional[str]:
    user_id = tracker.session.user_id
    return None if user_id == "guest" else user_id


# ==================== SESSION LIFECYCLE ====================

@router.post("", response_model=SessionStateResponse)
async def start_session(request: SessionStartRequest):
    """
    Start a practice session.

    Uses the given exercises (all exercises, easiest first, when omitted), or
    a generated endless batch when ``endless_mode`` is set.
    """
    try:
        user_id = "guest"
        if request.username:
            user = await cosmos_db_service.find_or_create_user(request.username)
            user_id = user["id"]

        if request.endless_mode:
            exercises = await fetch_endless_exercises(request.username, request.count, request.level)
        else:
            exercises = await load_exercises(request.exercise_ids)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error starting session: {e}")
        raise HTTPException(status_code=500, detail="Failed to start session")

    if not exercises:
        raise HTTPException(status_code=400, detail="No exercises available")

    tracker = PracticeSessionTracker.start(
        exercises,
        user_id=user_id,
        endless_mode=request.endless_mode,
        autosaver=make_autosaver(user_id)
    )
    session_registry.add(tracker)
    return to_state(tracker)


@router.get("/{session_id}", response_model=SessionStateResponse)
async def get_session(session_id: str):
    """Get the current state of an open session."""
    return to_state(get_tracker(session_id))


@router.post("/{session_id}/end", response_model=SessionStateResponse)
async def end_session(session_id: str):
    """Complete the session, write it out and close it."""
    tracker = get_tracker(session_id)
    await tracker.end()
    session_registry.remove(session_id)
    return to_state(tracker)


@router.delete("/{session_id}", response_model=SessionStateResponse)
async def leave_session(session_id: str):
    """
    Leave a session without completing it.

    The current state, including an unfinished attempt, is saved on a best
    effort basis and the session is closed.
    """
    tracker = await session_registry.close(session_id)
    if tracker is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return to_state(tracker)


# ==================== DRAWING ====================

@router.post("/{session_id}/strokes", response_model=SessionStateResponse)
async def add_stroke(session_id: str, request: AddStrokeRequest):
    """Add a finished stroke to the current character and rescore it."""
    tracker = get_tracker(session_id)
    try:
        tracker.add_stroke(request.stroke)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if request.canvas_snapshot:
        tracker.save_snapshot(request.canvas_snapshot)
    return to_state(tracker)


@router.post("/{session_id}/complete-exercise", response_model=SessionStateResponse)
async def complete_exercise(session_id: str):
    """Mark the current character's attempt completed."""
    tracker = get_tracker(session_id)
    tracker.complete_current_exercise()
    return to_state(tracker)


@router.post("/{session_id}/reset-exercise", response_model=SessionStateResponse)
async def reset_exercise(session_id: str):
    """Discard the current exercise's attempts and restart it."""
    tracker = get_tracker(session_id)
    tracker.reset_current_exercise()
    return to_state(tracker)


# ==================== NAVIGATION ====================

@router.post("/{session_id}/next-character", response_model=NavigationResponse)
async def next_character(session_id: str):
    tracker = get_tracker(session_id)
    moved = tracker.next_character()
    return NavigationResponse(moved=moved, session=to_state(tracker))


@router.post("/{session_id}/previous-character", response_model=NavigationResponse)
async def previous_character(session_id: str):
    tracker = get_tracker(session_id)
    moved = tracker.previous_character()
    return NavigationResponse(moved=moved, session=to_state(tracker))


@router.post("/{session_id}/next-exercise", response_model=NavigationResponse)
async def next_exercise(session_id: str):
    """
    Move to the next exercise.

    At the end of an endless session a fresh batch is fetched first; regular
    sessions wrap around to the first exercise.
    """
    tracker = get_tracker(session_id)
    session = tracker.session

    more_exercises = None
    if session.endless_mode and session.current_exercise_index + 1 >= len(session.exercises):
        try:
            more_exercises = await fetch_endless_exercises(
                username_of(tracker),
                count=ENDLESS_BATCH_SIZE
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching more exercises: {e}")
            raise HTTPException(status_code=500, detail="Failed to generate exercises")

    moved = tracker.next_exercise(more_exercises)
    return NavigationResponse(moved=moved, session=to_state(tracker))


@router.post("/{session_id}/previous-exercise", response_model=NavigationResponse)
async def previous_exercise(session_id: str):
    tracker = get_tracker(session_id)
    moved = tracker.previous_exercise()
    return NavigationResponse(moved=moved, session=to_state(tracker))
