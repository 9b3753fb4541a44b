"""
Exercise Schemas
Request and response schemas for exercise API endpoints.
"""
from typing import Optional
from pydantic import BaseModel, Field

from app.models.exercise import Exercise
from app.models.progress import ProgressionStats


# ==================== REQUEST SCHEMAS ====================

class EndlessResultRequest(BaseModel):
    """Result of one endless-mode character."""
    character: str = Field(..., min_length=1, description="Traditional character")
    accuracy: float = Field(..., ge=0, le=100)
    username: Optional[str] = Field(default=None, description="Persist progression for this learner")


# ==================== RESPONSE SCHEMAS ====================

class ExerciseListResponse(BaseModel):
    """All exercises, easiest first."""
    exercises: list[Exercise] = Field(default_factory=list)
    total: int = 0


class EndlessExercisesResponse(BaseModel):
    """A fresh endless-mode batch."""
    exercises: list[Exercise] = Field(default_factory=list)
    progression: ProgressionStats
    has_more: bool = True
    total_available: int = 0


class EndlessResultResponse(BaseModel):
    """Selector state after an endless-mode result."""
    success: bool = True
    character_completed: bool = False
    level_advanced: bool = False
    progression: ProgressionStats
    progress: Optional[dict] = None
