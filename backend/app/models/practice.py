"""
Practice Models
Attempts and the sessions that group them.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.models.exercise import Exercise, ExerciseType
from app.models.stroke import Stroke


class PracticeAttempt(BaseModel):
    """One scored attempt at one character within one exercise"""
    exercise_id: str
    character_id: str
    strokes: list[Stroke] = Field(default_factory=list)
    accuracy: float = Field(default=0, ge=0, le=100)
    time_spent_ms: int = Field(default=0, ge=0)
    completed: bool = False
    attempt_number: int = Field(default=1, ge=1)
    canvas_snapshot: Optional[str] = Field(default=None, description="Base64 image data")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class PracticeSession(BaseModel):
    """A sitting: a sequence of attempts across exercises and characters"""
    id: str
    user_id: str = "guest"
    exercises: list[Exercise] = Field(default_factory=list)
    current_exercise_index: int = Field(default=0, ge=0)
    current_character_index: int = Field(default=0, ge=0)
    attempts: list[PracticeAttempt] = Field(default_factory=list)
    overall_accuracy: float = Field(default=0, ge=0, le=100)
    total_time_spent: int = Field(default=0, ge=0, description="Milliseconds")
    completed: bool = False
    endless_mode: bool = False
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage. Exercises are stored by id."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "exerciseIds": [exercise.id for exercise in self.exercises],
            "currentExerciseIndex": self.current_exercise_index,
            "currentCharacterIndex": self.current_character_index,
            "attempts": [
                {
                    "exerciseId": attempt.exercise_id,
                    "characterId": attempt.character_id,
                    "strokeCount": len(attempt.strokes),
                    "accuracy": attempt.accuracy,
                    "timeSpent": attempt.time_spent_ms,
                    "completed": attempt.completed,
                    "createdAt": attempt.created_at.isoformat()
                }
                for attempt in self.attempts
            ],
            "overallAccuracy": self.overall_accuracy,
            "totalTimeSpent": self.total_time_spent,
            "completed": self.completed,
            "endlessMode": self.endless_mode,
            "startedAt": self.started_at.isoformat(),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None
        }


class StoredAttempt(BaseModel):
    """Attempt as persisted by the attempts API"""
    id: str
    user_id: str
    session_id: str
    exercise_id: str
    character_id: str
    accuracy: float = Field(..., ge=0, le=100)
    time_spent_ms: int = 0
    stroke_count: int = 0
    strokes: list[dict] = Field(default_factory=list)
    stroke_summary: dict = Field(default_factory=dict)
    canvas_snapshot: Optional[str] = None
    difficulty_level: int = Field(default=1, ge=1, le=5)
    exercise_type: ExerciseType = ExerciseType.CHARACTER
    completed: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        use_enum_values = True

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "sessionId": self.session_id,
            "exerciseId": self.exercise_id,
            "characterId": self.character_id,
            "accuracy": self.accuracy,
            "timeSpent": self.time_spent_ms,
            "strokeCount": self.stroke_count,
            "strokeVectors": self.strokes,
            "strokeSummary": self.stroke_summary,
            "canvasSnapshot": self.canvas_snapshot,
            "difficultyLevel": self.difficulty_level,
            "exerciseType": self.exercise_type,
            "completed": self.completed,
            "attemptedAt": self.created_at.isoformat()
        }
