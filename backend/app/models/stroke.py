"""
Stroke Models
Defines captured pointer data and the metrics derived from it.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class StrokeType(str, Enum):
    """Shape bucket assigned to a drawn stroke"""
    DOT = "dot"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"
    CURVE = "curve"


class Point(BaseModel):
    """A single sampled pointer position. Immutable once recorded."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    pressure: Optional[float] = Field(default=None, ge=0, le=1)
    timestamp: Optional[int] = Field(default=None, description="Milliseconds since epoch")


class Stroke(BaseModel):
    """One pointer-down to pointer-up path drawn by the learner"""
    path: list[Point] = Field(default_factory=list)
    start_time: int = Field(default=0, description="Milliseconds since epoch")
    end_time: int = Field(default=0, description="Milliseconds since epoch")
    valid: bool = True
    accuracy: Optional[float] = Field(default=None, ge=0, le=100)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "path": [point.model_dump(exclude_none=True) for point in self.path],
            "startTime": self.start_time,
            "endTime": self.end_time,
            "valid": self.valid,
            "accuracy": self.accuracy
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Stroke":
        """Create from dictionary"""
        return cls(
            path=[Point(**point) for point in data.get("path", [])],
            start_time=data.get("startTime", 0),
            end_time=data.get("endTime", 0),
            valid=data.get("valid", True),
            accuracy=data.get("accuracy")
        )


class Direction(BaseModel):
    """Unit vector from the first to the last point of a stroke"""
    x: float = 0.0
    y: float = 0.0


class BoundingBox(BaseModel):
    """Axis-aligned bounds of a stroke path"""
    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class StrokeAnalysis(BaseModel):
    """Metrics derived from a stroke. Recomputed on demand, never stored as truth."""
    length: float = 0.0
    duration: int = 0
    speed: float = 0.0
    direction: Direction = Field(default_factory=Direction)
    type: StrokeType = StrokeType.DOT
    point_count: int = 0
    average_pressure: float = 1.0
    bounding_box: BoundingBox = Field(default_factory=BoundingBox)

    model_config = ConfigDict(use_enum_values=True)


class StrokeSummary(BaseModel):
    """Aggregate of the strokes drawn for one character attempt"""
    total_strokes: int = 0
    total_time: int = Field(default=0, description="Sum of stroke durations in ms")
    average_speed: float = 0.0
    average_stroke_length: float = 0.0
    stroke_types: dict[str, int] = Field(default_factory=dict)
