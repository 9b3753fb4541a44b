"""
Attempt Schemas
Request and response schemas for attempt API endpoints.
"""
from typing import Optional
from pydantic import BaseModel, Field

from app.models.exercise import ExerciseType
from app.models.stroke import Stroke, StrokeSummary


REQUIRED_ATTEMPT_FIELDS = ("username", "session_id", "exercise_id", "character_id", "accuracy")


# ==================== REQUEST SCHEMAS ====================

class AttemptSubmitRequest(BaseModel):
    """
    Attempt submission.

    Required fields are declared optional so a missing one is reported with
    the full list of missing fields instead of a generic validation error.
    """
    username: Optional[str] = None
    session_id: Optional[str] = None
    exercise_id: Optional[str] = None
    character_id: Optional[str] = None
    accuracy: Optional[float] = Field(default=None, ge=0, le=100)
    time_spent_ms: int = Field(default=0, ge=0)
    strokes: list[Stroke] = Field(default_factory=list)
    canvas_snapshot: Optional[str] = Field(default=None, description="Base64 image data")
    difficulty_level: int = Field(default=1, ge=1, le=5)
    exercise_type: ExerciseType = ExerciseType.CHARACTER

    class Config:
        use_enum_values = True

    def missing_fields(self) -> list[str]:
        """Required fields that are absent or empty"""
        return [
            field for field in REQUIRED_ATTEMPT_FIELDS
            if getattr(self, field) is None or getattr(self, field) == ""
        ]


# ==================== RESPONSE SCHEMAS ====================

class AttemptSubmitResponse(BaseModel):
    """Result of an attempt submission."""
    success: bool = True
    attempt_id: Optional[str] = None
    message: str = "Practice attempt saved successfully"
    progress: Optional[dict] = None
    stroke_summary: Optional[StrokeSummary] = None


class AttemptListResponse(BaseModel):
    """A learner's recent attempts, newest first."""
    attempts: list[dict] = Field(default_factory=list)
    total: int = 0
