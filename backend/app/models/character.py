"""
Character Models
Reference data for the characters learners practice.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.models.stroke import Point


class TemplateStrokeType(str, Enum):
    """Stroke kinds used by the reference stroke templates"""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    LEFT_FALLING = "left-falling"
    RIGHT_FALLING = "right-falling"
    TURNING = "turning"


class StrokeTemplate(BaseModel):
    """Reference path for one stroke of a character"""
    stroke_order: int = Field(..., ge=1)
    path: list[Point] = Field(default_factory=list)
    stroke_type: TemplateStrokeType = TemplateStrokeType.HORIZONTAL

    class Config:
        use_enum_values = True


class Character(BaseModel):
    """A single traditional character. Created at seed time, read-only at runtime."""
    id: str
    traditional: str = Field(..., min_length=1)
    simplified: Optional[str] = None
    jyutping: str = Field(..., description="Cantonese romanization")
    english: str = Field(..., description="English gloss")
    stroke_count: int = Field(..., gt=0)
    frequency: Optional[int] = Field(default=None, description="Frequency rank, 1 = most common")
    difficulty: int = Field(default=1, ge=1, le=5)
    strokes: list[StrokeTemplate] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "id": self.id,
            "traditional": self.traditional,
            "simplified": self.simplified,
            "jyutping": self.jyutping,
            "english": self.english,
            "strokeCount": self.stroke_count,
            "frequency": self.frequency,
            "difficulty": self.difficulty,
            "strokePatterns": [
                {
                    "strokeOrder": stroke.stroke_order,
                    "pathData": [point.model_dump(exclude_none=True) for point in stroke.path],
                    "strokeType": stroke.stroke_type
                }
                for stroke in self.strokes
            ]
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Character":
        """Create from dictionary"""
        patterns = sorted(
            data.get("strokePatterns", []),
            key=lambda pattern: pattern.get("strokeOrder", 0)
        )
        return cls(
            id=data["id"],
            traditional=data["traditional"],
            simplified=data.get("simplified"),
            jyutping=data.get("jyutping", ""),
            english=data.get("english", ""),
            stroke_count=data["strokeCount"],
            frequency=data.get("frequency"),
            difficulty=data.get("difficulty", 1),
            strokes=[
                StrokeTemplate(
                    stroke_order=pattern["strokeOrder"],
                    path=[Point(**point) for point in pattern.get("pathData", [])],
                    stroke_type=pattern.get("strokeType") or TemplateStrokeType.HORIZONTAL
                )
                for pattern in patterns
            ]
        )
