"""
Stroke Schemas
Request and response schemas for stroke analysis.
"""
from typing import Optional
from pydantic import BaseModel, Field

from app.models.stroke import Stroke, StrokeAnalysis, StrokeSummary


class StrokeAnalyzeRequest(BaseModel):
    """Strokes to analyze, with the reference stroke count when scoring is wanted."""
    strokes: list[Stroke] = Field(default_factory=list)
    expected_stroke_count: Optional[int] = Field(default=None, gt=0)


class StrokeAnalyzeResponse(BaseModel):
    """Per-stroke metrics, their aggregate and the placeholder score."""
    analyses: list[StrokeAnalysis] = Field(default_factory=list)
    summary: StrokeSummary
    accuracy: Optional[float] = None
    stroke_count_score: Optional[float] = None
