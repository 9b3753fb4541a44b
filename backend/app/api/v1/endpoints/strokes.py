"""
Strokes API Endpoints
Stateless geometry analysis of drawn strokes.
"""
from fastapi import APIRouter, HTTPException
import logging

from app.schemas.strokes import StrokeAnalyzeRequest, StrokeAnalyzeResponse
from app.utils.accuracy import count_penalty_score, score_attempt
from app.utils.stroke_analysis import analyze_stroke, summarize_strokes


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=StrokeAnalyzeResponse)
async def analyze_strokes(request: StrokeAnalyzeRequest):
    """
    Analyze strokes.

    Returns length, duration, speed, direction, shape, pressure and bounds per
    stroke plus their summary. With ``expected_stroke_count`` the attempt is
    also scored.
    """
    try:
        analyses = [analyze_stroke(stroke) for stroke in request.strokes]
        summary = summarize_strokes(request.strokes)

        accuracy = None
        stroke_count_score = None
        if request.expected_stroke_count:
            accuracy = score_attempt(request.strokes, request.expected_stroke_count)
            stroke_count_score = count_penalty_score(
                request.expected_stroke_count,
                len(request.strokes)
            )

        return StrokeAnalyzeResponse(
            analyses=analyses,
            summary=summary,
            accuracy=accuracy,
            stroke_count_score=stroke_count_score
        )
    except Exception as e:
        logger.error(f"Error analyzing strokes: {e}")
        raise HTTPException(status_code=500, detail="Failed to analyze strokes")
