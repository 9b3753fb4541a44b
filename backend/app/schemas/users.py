"""
User Schemas
Request and response schemas for user API endpoints.
"""
from typing import Optional
from pydantic import BaseModel, Field

from app.models.progress import ProgressStats
from app.models.user import UserPreferences


# ==================== REQUEST SCHEMAS ====================

class PreferencesUpdateRequest(BaseModel):
    """Partial preference update; omitted fields keep their value."""
    last_session_id: Optional[str] = None
    show_character: Optional[bool] = None
    show_jyutping: Optional[bool] = None
    show_english: Optional[bool] = None
    theme: Optional[str] = Field(default=None, pattern="^(light|dark)$")
    language: Optional[str] = Field(default=None, pattern="^(en|zh)$")


# ==================== RESPONSE SCHEMAS ====================

class UserResponse(BaseModel):
    """Public user data."""
    id: str
    username: str
    name: str
    email: Optional[str] = None
    is_guest: bool = False


class UserProgressResponse(BaseModel):
    """Dashboard data for one learner."""
    username: str
    progress: list[dict] = Field(default_factory=list)
    recent_attempts: list[dict] = Field(default_factory=list)
    stats: ProgressStats
    message: Optional[str] = None


class PreferencesResponse(BaseModel):
    """Stored preferences; ``saved`` is False when storage is unavailable."""
    preferences: Optional[UserPreferences] = None
    saved: bool = False
