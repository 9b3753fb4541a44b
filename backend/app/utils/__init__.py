"""
Utilities Module
Contains the stroke analysis, scoring, scheduling and progression algorithms.
"""
from app.utils.stroke_analysis import analyze_stroke, classify_stroke, summarize_strokes
from app.utils.accuracy import score_attempt, count_penalty_score
from app.utils.srs_algorithm import SpacedRepetitionScheduler, srs_scheduler
from app.utils.progression import LearningProgression, LEARNING_LEVELS
from app.utils.stroke_count import get_stroke_count, calculate_difficulty, get_frequency_rank

__all__ = [
    "analyze_stroke", "classify_stroke", "summarize_strokes",
    "score_attempt", "count_penalty_score",
    "SpacedRepetitionScheduler", "srs_scheduler",
    "LearningProgression", "LEARNING_LEVELS",
    "get_stroke_count", "calculate_difficulty", "get_frequency_rank"
]
