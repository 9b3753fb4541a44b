"""
Tests for placeholder accuracy scoring and stroke-count lookups.
"""
import pytest

from app.models.stroke import Point, Stroke
from app.utils.accuracy import count_penalty_score, score_attempt, stroke_quality
from app.utils.stroke_count import (
    DEFAULT_STROKE_COUNT,
    NOT_RANKED,
    calculate_difficulty,
    get_frequency_rank,
    get_stroke_count
)


def sampled_stroke(point_count: int = 10, duration: int = 200) -> Stroke:
    return Stroke(
        path=[Point(x=i * 10, y=0) for i in range(point_count)],
        start_time=0,
        end_time=duration
    )


class TestCountPenalty:
    """Tests for stroke-count agreement."""

    def test_exact_count(self):
        assert count_penalty_score(3, 3) == 100

    def test_each_stroke_off_costs_twenty(self):
        assert count_penalty_score(3, 5) == 60
        assert count_penalty_score(5, 3) == 60

    def test_floor_at_zero(self):
        assert count_penalty_score(3, 10) == 0

    def test_custom_penalty(self):
        assert count_penalty_score(3, 4, penalty_per_stroke=10) == 90


class TestScoreAttempt:
    """Tests for the combined attempt score."""

    def test_no_strokes_scores_zero(self):
        assert score_attempt([], 3) == 0.0

    def test_reference_example(self):
        """Three 10-point strokes of 200 ms against 3 expected strokes."""
        strokes = [sampled_stroke() for _ in range(3)]
        assert stroke_quality(strokes[0]) == pytest.approx(24.0)
        assert score_attempt(strokes, 3) == pytest.approx(69.6)

    def test_quality_is_capped(self):
        stroke = sampled_stroke(point_count=60, duration=10_000)
        assert stroke_quality(stroke) == 100.0

    def test_score_never_rises_away_from_expected_count(self):
        stroke = sampled_stroke()
        scores = [score_attempt([stroke] * n, 4) for n in range(4, 12)]
        assert scores == sorted(scores, reverse=True)

    def test_score_within_bounds(self):
        strokes = [sampled_stroke(point_count=80, duration=5000) for _ in range(2)]
        assert 0 <= score_attempt(strokes, 2, count_weight=1, quality_weight=1) <= 100


class TestStrokeCount:
    """Tests for stroke-count lookups and difficulty."""

    def test_known_character(self):
        assert get_stroke_count("大") == 3
        assert get_stroke_count("聽") == 22

    def test_unknown_character_uses_default(self):
        assert get_stroke_count("龘") == DEFAULT_STROKE_COUNT

    @pytest.mark.parametrize("strokes,difficulty", [
        (1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (10, 3), (11, 4), (15, 4), (16, 5), (30, 5)
    ])
    def test_difficulty_scale(self, strokes, difficulty):
        assert calculate_difficulty(strokes) == difficulty

    def test_frequency_rank(self):
        ordered = ["一", "二", "三"]
        assert get_frequency_rank("一", ordered) == 1
        assert get_frequency_rank("三", ordered) == 3
        assert get_frequency_rank("四", ordered) == NOT_RANKED
