"""
Progress Models
Defines per-character spaced repetition progress and per-user progression state.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class UserProgress(BaseModel):
    """Spaced repetition progress for one (user, character) pair"""
    user_id: str
    character_id: str
    accuracy_history: list[float] = Field(
        default_factory=list,
        description="Most recent accuracies, oldest first"
    )
    total_attempts: int = Field(default=0, ge=0)
    streak: int = Field(
        default=0,
        ge=0,
        description="Consecutive attempts at or above the streak threshold"
    )
    mastery_level: int = Field(
        default=0,
        ge=0,
        le=5,
        description="Derived from average accuracy and streak"
    )
    last_practiced: Optional[datetime] = None
    next_review: Optional[datetime] = None

    @property
    def average_accuracy(self) -> float:
        """Mean of the retained accuracy history"""
        if not self.accuracy_history:
            return 0.0
        return sum(self.accuracy_history) / len(self.accuracy_history)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "userId": self.user_id,
            "characterId": self.character_id,
            "accuracyHistory": self.accuracy_history,
            "totalAttempts": self.total_attempts,
            "streak": self.streak,
            "masteryLevel": self.mastery_level,
            "averageAccuracy": round(self.average_accuracy, 2),
            "lastPracticed": self.last_practiced.isoformat() if self.last_practiced else None,
            "nextReview": self.next_review.isoformat() if self.next_review else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProgress":
        """Create from dictionary"""
        return cls(
            user_id=data["userId"],
            character_id=data["characterId"],
            accuracy_history=data.get("accuracyHistory", []),
            total_attempts=data.get("totalAttempts", 0),
            streak=data.get("streak", 0),
            mastery_level=data.get("masteryLevel", 0),
            last_practiced=datetime.fromisoformat(data["lastPracticed"]) if data.get("lastPracticed") else None,
            next_review=datetime.fromisoformat(data["nextReview"]) if data.get("nextReview") else None
        )


class ProgressionState(BaseModel):
    """Endless-mode progression for one learner"""
    user_id: Optional[str] = None
    current_level: int = Field(default=1, ge=1, le=5)
    completed_characters: set[str] = Field(default_factory=set)
    mastery_threshold: float = Field(default=85, ge=0, le=100)
    advancement_threshold: float = Field(default=80, ge=0, le=100)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "userId": self.user_id,
            "currentLevel": self.current_level,
            "completedCharacters": sorted(self.completed_characters),
            "masteryThreshold": self.mastery_threshold,
            "advancementThreshold": self.advancement_threshold
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressionState":
        """Create from dictionary"""
        return cls(
            user_id=data.get("userId"),
            current_level=data.get("currentLevel", 1),
            completed_characters=set(data.get("completedCharacters", [])),
            mastery_threshold=data.get("masteryThreshold", 85),
            advancement_threshold=data.get("advancementThreshold", 80)
        )


class ProgressionStats(BaseModel):
    """Snapshot of a learner's position in the level progression"""
    current_level: int
    level_name: str
    total_mastered: int
    mastered_in_current_level: int
    total_in_current_level: int
    level_progress: float
    can_advance: bool


class ProgressStats(BaseModel):
    """Aggregate statistics for one learner"""
    total_attempts: int = 0
    average_accuracy: float = 0.0
    characters_learned: int = 0
    mastered_characters: int = 0
    due_for_review: int = 0
