"""
Session Schemas
Request and response schemas for practice session endpoints.
"""
from typing import Optional
from pydantic import BaseModel, Field

from app.models.character import Character
from app.models.exercise import Exercise
from app.models.practice import PracticeAttempt
from app.models.stroke import Stroke


# ==================== REQUEST SCHEMAS ====================

class SessionStartRequest(BaseModel):
    """Start a practice session."""
    username: Optional[str] = Field(default=None, description="Guest session when omitted")
    exercise_ids: Optional[list[str]] = Field(
        default=None,
        description="Exercises to practise, in order (all exercises when omitted)"
    )
    endless_mode: bool = False
    level: Optional[int] = Field(default=None, ge=1, le=5)
    count: int = Field(default=10, ge=1, le=50)


class AddStrokeRequest(BaseModel):
    """A stroke finished on the canvas."""
    stroke: Stroke
    canvas_snapshot: Optional[str] = Field(default=None, description="Base64 image data")


# ==================== RESPONSE SCHEMAS ====================

class SessionStateResponse(BaseModel):
    """Current position and scoring of an open session."""
    session_id: str
    user_id: str
    is_active: bool
    endless_mode: bool = False
    completed: bool = False
    current_exercise_index: int = 0
    current_character_index: int = 0
    total_exercises: int = 0
    current_exercise: Optional[Exercise] = None
    current_character: Optional[Character] = None
    current_attempt: Optional[PracticeAttempt] = None
    session_progress: float = 0.0
    exercise_progress: float = 0.0
    overall_accuracy: float = 0.0
    total_time_spent: int = 0
    attempt_count: int = 0


class NavigationResponse(BaseModel):
    """Result of a navigation command."""
    moved: bool
    session: SessionStateResponse
