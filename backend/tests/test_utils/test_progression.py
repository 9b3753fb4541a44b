"""
Tests for frequency-based learning progression.
"""
import random
import pytest

from app.models.progress import ProgressionState
from app.utils.progression import (
    FREQUENCY_ORDERED_CHARACTERS,
    LEARNING_LEVELS,
    MAX_LEVEL,
    LearningProgression
)
from app.utils.stroke_count import calculate_difficulty, get_stroke_count


LEVEL_ONE = ["一", "二", "三", "我", "你", "係", "有", "個", "嘅", "喺"]


def difficulty_of(char: str) -> int:
    return calculate_difficulty(get_stroke_count(char))


def make_progression(level: int = 1, completed=(), seed: int = 7) -> LearningProgression:
    state = ProgressionState(current_level=level, completed_characters=set(completed))
    return LearningProgression(state, rng=random.Random(seed))


class TestLevels:
    """Tests for the level table."""

    def test_levels_are_cumulative(self):
        assert [level.character_count for level in LEARNING_LEVELS] == [10, 50, 100, 200, 300]
        assert LEARNING_LEVELS[0].characters == LEVEL_ONE
        for smaller, larger in zip(LEARNING_LEVELS, LEARNING_LEVELS[1:]):
            assert larger.characters[:len(smaller.characters)] == smaller.characters

    def test_level_characters_are_unique(self):
        for level in LEARNING_LEVELS:
            assert len(level.characters) == len(set(level.characters))

    def test_frequency_list_length(self):
        assert len(FREQUENCY_ORDERED_CHARACTERS) == 300

    def test_unknown_level_falls_back_to_first(self):
        progression = make_progression()
        progression.state.current_level = 0
        assert progression.get_current_level().name == "Foundation"


class TestNextCharacters:
    """Tests for practice selection."""

    def test_round_robin_across_difficulties(self):
        """Easiest bucket first, one character from each bucket per pass."""
        progression = make_progression()
        buckets = sorted({difficulty_of(char) for char in LEVEL_ONE})

        selected = progression.next_characters_for_practice(len(buckets))

        assert [difficulty_of(char) for char in selected] == buckets

    def test_whole_level(self):
        progression = make_progression()
        selected = progression.next_characters_for_practice(10)

        assert sorted(selected) == sorted(LEVEL_ONE)

    def test_jitter_varies_order_between_seeds(self):
        orderings = {
            tuple(make_progression(level=3, seed=seed).next_characters_for_practice(30))
            for seed in range(50)
        }
        assert len(orderings) > 1

    def test_frequency_stays_the_primary_key(self):
        """Within a bucket a character only overtakes near neighbours in the frequency list."""
        level = LEARNING_LEVELS[2]
        rank = {char: index for index, char in enumerate(level.characters)}
        reach = len(level.characters) / 4

        for seed in range(20):
            selected = make_progression(level=3, seed=seed).next_characters_for_practice(len(level.characters))

            by_bucket: dict[int, list[str]] = {}
            for char in selected:
                by_bucket.setdefault(difficulty_of(char), []).append(char)

            for bucket in by_bucket.values():
                for index, earlier in enumerate(bucket):
                    for later in bucket[index + 1:]:
                        assert rank[earlier] < rank[later] + reach

    def test_excludes_completed(self):
        progression = make_progression(completed=["一", "有"])
        selected = progression.next_characters_for_practice(10)

        assert "一" not in selected
        assert "有" not in selected
        assert len(selected) == 8

    def test_returns_at_most_available(self):
        progression = make_progression(completed=LEVEL_ONE[:7])
        assert sorted(progression.next_characters_for_practice(10)) == sorted(LEVEL_ONE[7:])

    def test_non_positive_count(self):
        progression = make_progression()
        assert progression.next_characters_for_practice(0) == []
        assert progression.next_characters_for_practice(-3) == []

    def test_no_duplicates(self):
        progression = make_progression(level=3, seed=1)
        selected = progression.next_characters_for_practice(60)
        assert len(selected) == len(set(selected)) == 60

    def test_completed_level_advances(self):
        progression = make_progression(completed=LEVEL_ONE)
        selected = progression.next_characters_for_practice(5)

        assert progression.state.current_level == 2
        assert len(selected) == 5
        assert not set(selected) & set(LEVEL_ONE)

    def test_last_level_complete_reviews(self):
        last = LEARNING_LEVELS[-1]
        progression = make_progression(level=MAX_LEVEL, completed=last.characters)
        selected = progression.next_characters_for_practice(50)

        assert progression.state.current_level == MAX_LEVEL
        assert len(selected) == 10
        assert set(selected) <= set(last.characters)


class TestMasteryAndAdvancement:
    """Tests for marking characters and advancing levels."""

    def test_mark_completed_threshold(self):
        progression = make_progression()
        assert progression.mark_completed("一", 84.9) is False
        assert progression.mark_completed("一", 85) is True
        assert "一" in progression.state.completed_characters

    def test_cannot_advance_below_threshold(self):
        progression = make_progression(completed=LEVEL_ONE[:7])
        assert progression.can_advance_level() is False
        assert progression.advance_level() is False
        assert progression.state.current_level == 1

    def test_advance_at_threshold(self):
        progression = make_progression(completed=LEVEL_ONE[:8])
        assert progression.can_advance_level() is True
        assert progression.advance_level() is True
        assert progression.state.current_level == 2

    def test_no_advance_past_last_level(self):
        last = LEARNING_LEVELS[-1]
        progression = make_progression(level=MAX_LEVEL, completed=last.characters)
        assert progression.advance_level() is False

    def test_progression_stats(self):
        progression = make_progression(completed=LEVEL_ONE[:5])
        stats = progression.get_progression_stats()

        assert stats.current_level == 1
        assert stats.level_name == "Foundation"
        assert stats.total_mastered == 5
        assert stats.mastered_in_current_level == 5
        assert stats.total_in_current_level == 10
        assert stats.level_progress == pytest.approx(50.0)
        assert stats.can_advance is False

    @pytest.mark.parametrize("level", [level.level for level in LEARNING_LEVELS])
    def test_full_mastery_is_complete_progress(self, level):
        characters = LEARNING_LEVELS[level - 1].characters
        stats = make_progression(level=level, completed=characters).get_progression_stats()

        assert stats.level_progress == pytest.approx(100.0)
        assert stats.total_in_current_level == len(characters)
        assert stats.can_advance is True

    def test_advancement_counts_unique_characters(self):
        level = LEARNING_LEVELS[2]
        needed = -(-len(level.characters) * 80 // 100)

        assert make_progression(level=3, completed=level.characters[:needed]).can_advance_level() is True
        assert make_progression(level=3, completed=level.characters[:needed - 1]).can_advance_level() is False


class TestEndlessBatch:
    """Tests for practice plus review batches."""

    def test_practice_then_review(self):
        progression = make_progression(completed=LEVEL_ONE[:3])
        batch = progression.generate_endless_exercises(practice_count=4, review_count=2)

        practice, review = batch[:4], batch[4:]
        assert not set(practice) & set(LEVEL_ONE[:3])
        assert len(review) == 2
        assert set(review) <= set(LEVEL_ONE[:3])

    def test_no_review_without_mastery(self):
        progression = make_progression()
        batch = progression.generate_endless_exercises(practice_count=3, review_count=5)
        assert len(batch) == 3

    def test_seeded_selection_is_repeatable(self):
        first = make_progression(level=2, seed=42).generate_endless_exercises(10, 0)
        second = make_progression(level=2, seed=42).generate_endless_exercises(10, 0)
        assert first == second
