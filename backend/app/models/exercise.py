"""
Exercise Models
An exercise is an ordered set of characters practiced together.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.models.character import Character


class ExerciseType(str, Enum):
    """Kind of exercise"""
    CHARACTER = "character"
    PHRASE = "phrase"


class Exercise(BaseModel):
    """Exercise with its characters in writing order"""
    id: str
    type: ExerciseType = ExerciseType.CHARACTER
    title: str
    description: Optional[str] = None
    difficulty: int = Field(default=1, ge=1, le=5)
    total_strokes: int = Field(default=0, ge=0)
    jyutping: Optional[str] = None
    english: Optional[str] = None
    characters: list[Character] = Field(default_factory=list)

    class Config:
        use_enum_values = True

    def to_dict(self) -> dict:
        """Convert to dictionary for storage. Characters are stored by reference."""
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "totalStrokes": self.total_strokes,
            "jyutping": self.jyutping,
            "english": self.english,
            "exerciseCharacters": [
                {"characterId": character.id, "orderIndex": index}
                for index, character in enumerate(self.characters)
            ]
        }

    @classmethod
    def from_dict(cls, data: dict, characters: dict[str, Character]) -> "Exercise":
        """
        Create from a stored document.

        Args:
            data: Stored exercise document
            characters: Characters by id, used to resolve references

        Returns:
            Exercise with characters ordered by their order index
        """
        links = sorted(
            data.get("exerciseCharacters", []),
            key=lambda link: link.get("orderIndex", 0)
        )
        return cls(
            id=data["id"],
            type=data.get("type", ExerciseType.CHARACTER),
            title=data.get("title", ""),
            description=data.get("description"),
            difficulty=data.get("difficulty", 1),
            total_strokes=data.get("totalStrokes", 0),
            jyutping=data.get("jyutping"),
            english=data.get("english"),
            characters=[
                characters[link["characterId"]]
                for link in links
                if link.get("characterId") in characters
            ]
        )
