"""
Accuracy Scoring
Placeholder scoring for a character attempt.

The score combines how far the stroke count is from the expected count with a
rough per-stroke "care" proxy (denser sampling, longer dwell time). No shape
comparison against the reference templates is done here.

Scale is 0-100 and the score never increases as the stroke count moves away
from the expected count.
"""
from typing import Sequence

from app.config import settings
from app.models.stroke import Stroke


MAX_QUALITY = 100.0
MAX_DWELL_BONUS = 50.0
DWELL_MS_PER_POINT = 50.0


def count_penalty_score(
    expected_strokes: int,
    actual_strokes: int,
    penalty_per_stroke: float | None = None
) -> float:
    """
    Score stroke-count agreement.

    Args:
        expected_strokes: Reference stroke count of the character
        actual_strokes: Strokes drawn by the learner
        penalty_per_stroke: Points lost per missing/extra stroke

    Returns:
        Score in [0, 100]
    """
    if penalty_per_stroke is None:
        penalty_per_stroke = settings.SCORING_STROKE_COUNT_PENALTY
    return max(0.0, 100.0 - penalty_per_stroke * abs(expected_strokes - actual_strokes))


def stroke_quality(stroke: Stroke) -> float:
    """Quality proxy: 2 per sampled point plus up to 50 for dwell time."""
    duration = stroke.end_time - stroke.start_time
    dwell = min(MAX_DWELL_BONUS, duration / DWELL_MS_PER_POINT)
    return min(MAX_QUALITY, 2 * len(stroke.path) + dwell)


def average_quality(strokes: Sequence[Stroke]) -> float:
    if not strokes:
        return 0.0
    return sum(stroke_quality(stroke) for stroke in strokes) / len(strokes)


def score_attempt(
    strokes: Sequence[Stroke],
    expected_strokes: int,
    count_weight: float | None = None,
    quality_weight: float | None = None
) -> float:
    """
    Score all strokes drawn so far for one character.

    Args:
        strokes: Strokes of the current attempt
        expected_strokes: Character's reference stroke count
        count_weight: Weight of the stroke-count score (default from settings)
        quality_weight: Weight of the average quality (default from settings)

    Returns:
        Accuracy in [0, 100]; 0 when nothing was drawn
    """
    if not strokes:
        return 0.0

    if count_weight is None:
        count_weight = settings.SCORING_COUNT_WEIGHT
    if quality_weight is None:
        quality_weight = settings.SCORING_QUALITY_WEIGHT

    accuracy = (
        count_weight * count_penalty_score(expected_strokes, len(strokes))
        + quality_weight * average_quality(strokes)
    )
    return max(0.0, min(100.0, accuracy))
