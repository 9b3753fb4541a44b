"""
User Models
Learners are identified by a unique username; there is no login.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Model for creating (or finding) a user"""
    username: str = Field(..., min_length=1, max_length=64)
    name: Optional[str] = None
    email: Optional[str] = None


class User(BaseModel):
    """User model"""
    id: str
    username: str
    name: str
    email: Optional[str] = None
    is_guest: bool = False

    # Metadata
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create from a stored document"""
        return cls(
            id=data["id"],
            username=data["username"],
            name=data.get("name") or data["username"],
            email=data.get("email"),
            is_guest=data.get("isGuest", False)
        )


class UserPreferences(BaseModel):
    """Client-side display preferences"""
    username: str
    last_session_id: Optional[str] = None
    show_character: bool = True
    show_jyutping: bool = True
    show_english: bool = True
    theme: Optional[str] = Field(default=None, description="light or dark")
    language: Optional[str] = Field(default=None, description="en or zh")
