"""
Users API Endpoints
REST API for learners, their progress and their display preferences.
Learners are identified by username only; there is no authentication.
"""
from fastapi import APIRouter, HTTPException, Query
import logging

from app.agents.orchestrator import run_orchestrator
from app.models.user import User, UserCreate, UserPreferences
from app.schemas.users import (
    PreferencesResponse,
    PreferencesUpdateRequest,
    UserProgressResponse,
    UserResponse
)
from app.services.cosmos_db_service import cosmos_db_service
from app.services.preference_store import preference_store


logger = logging.getLogger(__name__)

router = APIRouter()


def to_response(document: dict) -> UserResponse:
    user = User.from_dict(document)
    return UserResponse(
        id=user.id,
        username=user.username,
        name=user.name,
        email=user.email,
        is_guest=user.is_guest
    )


# ==================== USER ENDPOINTS ====================

@router.post("", response_model=UserResponse)
async def find_or_create_user(user_data: UserCreate):
    """
    Get a learner by username, creating it when it does not exist yet.
    """
    try:
        document = await cosmos_db_service.find_or_create_user(
            user_data.username,
            name=user_data.name,
            email=user_data.email
        )
        return to_response(document)
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.get("", response_model=UserResponse)
async def get_user(username: str = Query(..., min_length=1)):
    """Get a learner by username."""
    try:
        document = await cosmos_db_service.get_user_by_username(username)
    except Exception as e:
        logger.error(f"Error fetching user: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch user")

    if not document:
        raise HTTPException(status_code=404, detail="User not found")
    return to_response(document)


# ==================== PROGRESS ====================

@router.get("/{username}/progress", response_model=UserProgressResponse)
async def get_user_progress(username: str):
    """
    Get a learner's dashboard data.

    Returns:
    - Spaced repetition progress per character, with review priority
    - The most recent attempts
    - Totals: attempts, average accuracy, characters learned and mastered,
      characters due for review
    """
    try:
        user = await cosmos_db_service.get_user_by_username(username)
    except Exception as e:
        logger.error(f"Error fetching user progress: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch user progress")

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        state = await run_orchestrator(username=username, request_type="get_progress")
    except Exception as e:
        logger.error(f"Error fetching user progress: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch user progress")

    if state.get("has_error"):
        status_code = state.get("error_status", 500)
        logger.error(f"Progress pipeline error: {state.get('error_message')}")
        raise HTTPException(
            status_code=status_code,
            detail="User not found" if status_code == 404 else "Failed to fetch user progress"
        )

    response = state.get("response", {})
    return UserProgressResponse(
        username=username,
        progress=response.get("progress", []),
        recent_attempts=response.get("recent_attempts", []),
        stats=response.get("stats", {}),
        message=response.get("message")
    )


# ==================== PREFERENCES ====================

@router.get("/{username}/preferences", response_model=PreferencesResponse)
async def get_preferences(username: str):
    """
    Get display preferences.

    Preferences are best effort: when nothing is stored (or storage is
    unavailable) ``preferences`` is null.
    """
    preferences = preference_store.get(username)
    return PreferencesResponse(preferences=preferences, saved=preferences is not None)


@router.put("/{username}/preferences", response_model=PreferencesResponse)
async def update_preferences(username: str, request: PreferencesUpdateRequest):
    """Update display preferences; ``saved`` is false when they could not be stored."""
    current = preference_store.get(username) or UserPreferences(username=username)
    updated = current.model_copy(update=request.model_dump(exclude_none=True))
    saved = preference_store.save(updated)
    return PreferencesResponse(preferences=updated, saved=saved)
