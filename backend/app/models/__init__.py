"""
Pydantic Models Module
Contains data models for all entities in the application.
"""
from app.models.stroke import Point, Stroke, StrokeType, Direction, BoundingBox, StrokeAnalysis, StrokeSummary
from app.models.character import Character, StrokeTemplate, TemplateStrokeType
from app.models.exercise import Exercise, ExerciseType
from app.models.practice import PracticeAttempt, PracticeSession, StoredAttempt
from app.models.progress import UserProgress, ProgressionState, ProgressionStats, ProgressStats
from app.models.user import User, UserCreate, UserPreferences

__all__ = [
    "Point", "Stroke", "StrokeType", "Direction", "BoundingBox", "StrokeAnalysis", "StrokeSummary",
    "Character", "StrokeTemplate", "TemplateStrokeType",
    "Exercise", "ExerciseType",
    "PracticeAttempt", "PracticeSession", "StoredAttempt",
    "UserProgress", "ProgressionState", "ProgressionStats", "ProgressStats",
    "User", "UserCreate", "UserPreferences"
]
