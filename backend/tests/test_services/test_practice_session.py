"""
Tests for practice session tracking and debounced autosave.
"""
import asyncio
import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

from app.models.practice import PracticeSession
from app.services.practice_session import (
    AttemptAutosaver,
    PracticeSessionRegistry,
    PracticeSessionTracker
)


class FakeClock:
    """Clock advanced by hand."""

    def __init__(self):
        self.now = datetime(2024, 3, 1, 9, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(sample_exercises, clock):
    return PracticeSessionTracker.start(sample_exercises, user_id="learner", session_id="s1", clock=clock)


# ==================== AUTOSAVER ====================

class TestAttemptAutosaver:
    """Tests for the debounced writer."""

    @pytest.mark.asyncio
    async def test_burst_is_written_once(self):
        save = AsyncMock()
        autosaver = AttemptAutosaver(save, delay=0.05)

        for index in range(5):
            autosaver.schedule(PracticeSession(id="s1", total_time_spent=index))
        await asyncio.sleep(0.2)

        save.assert_awaited_once()
        assert save.await_args.args[0].total_time_spent == 4
        assert autosaver.saves == 1
        assert autosaver.has_pending is False

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self):
        save = AsyncMock()
        autosaver = AttemptAutosaver(save, delay=10)
        session = PracticeSession(id="s1")

        autosaver.schedule(session)
        session.total_time_spent = 999
        await autosaver.flush()

        assert save.await_args.args[0].total_time_spent == 0

    @pytest.mark.asyncio
    async def test_flush_writes_immediately(self):
        save = AsyncMock()
        autosaver = AttemptAutosaver(save, delay=10)

        autosaver.schedule(PracticeSession(id="s1"))
        assert await autosaver.flush() is True
        save.assert_awaited_once()

        # Nothing pending, nothing written
        assert await autosaver.flush() is False
        save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_writes_final_state(self):
        save = AsyncMock()
        autosaver = AttemptAutosaver(save, delay=10)

        autosaver.schedule(PracticeSession(id="s1"))
        await autosaver.close(PracticeSession(id="s1", completed=True))

        save.assert_awaited_once()
        assert save.await_args.args[0].completed is True

    @pytest.mark.asyncio
    async def test_failure_is_counted_not_raised(self):
        save = AsyncMock(side_effect=RuntimeError("offline"))
        autosaver = AttemptAutosaver(save, delay=10)

        autosaver.schedule(PracticeSession(id="s1"))
        assert await autosaver.flush() is False
        assert autosaver.failures == 1
        assert autosaver.saves == 0


# ==================== TRACKER ====================

class TestSessionTracker:
    """Tests for session navigation and drawing."""

    def test_start_requires_exercises(self):
        with pytest.raises(ValueError):
            PracticeSessionTracker.start([])

    def test_start_position(self, tracker):
        assert tracker.session.id == "s1"
        assert tracker.current_exercise.id == "ex_1"
        assert tracker.current_character.traditional == "大"
        assert tracker.current_attempt is None
        assert tracker.session_progress == 0

    def test_add_stroke_scores_attempt(self, tracker, stroke_factory, clock):
        clock.advance(seconds=3)
        stroke = stroke_factory([(i * 10, 0) for i in range(10)])

        attempt = tracker.add_stroke(stroke)

        assert attempt.exercise_id == "ex_1"
        assert attempt.character_id == "char_da"
        assert len(attempt.strokes) == 1
        # 2 strokes short of 3: 0.6 * 60 + 0.4 * 24
        assert attempt.accuracy == pytest.approx(45.6)
        assert attempt.time_spent_ms == 3000
        assert tracker.session.total_time_spent == 3000

    def test_strokes_accumulate_on_one_attempt(self, tracker, stroke_factory):
        stroke = stroke_factory([(i * 10, 0) for i in range(10)])
        for _ in range(3):
            tracker.add_stroke(stroke)

        assert len(tracker.session.attempts) == 1
        assert tracker.current_attempt.accuracy == pytest.approx(69.6)

    def test_next_character_within_exercise(self, tracker):
        assert tracker.next_character() is False

        tracker.next_exercise()
        assert tracker.current_exercise.id == "ex_2"
        assert tracker.next_character() is True
        assert tracker.current_character.traditional == "人"
        assert tracker.next_character() is False

    def test_next_exercise_wraps_around(self, tracker):
        tracker.next_exercise()
        tracker.next_exercise()
        assert tracker.session.current_exercise_index == 0
        assert tracker.session.current_character_index == 0

    def test_endless_next_exercise_appends(self, sample_exercises, clock):
        tracker = PracticeSessionTracker.start(sample_exercises[:1], endless_mode=True, clock=clock)

        tracker.next_exercise(more_exercises=sample_exercises[1:])

        assert len(tracker.session.exercises) == 2
        assert tracker.current_exercise.id == "ex_2"
        assert tracker.session_progress == 0

    def test_previous_navigation(self, tracker):
        assert tracker.previous_exercise() is False
        assert tracker.previous_character() is False

        tracker.next_exercise()
        tracker.next_character()
        assert tracker.previous_character() is True
        assert tracker.session.current_character_index == 0

        assert tracker.previous_exercise() is True
        assert tracker.current_exercise.id == "ex_1"

    def test_previous_exercise_lands_on_last_character(self, sample_exercises, clock):
        exercises = [sample_exercises[1], sample_exercises[0]]
        tracker = PracticeSessionTracker.start(exercises, clock=clock)

        tracker.next_exercise()
        tracker.previous_exercise()

        assert tracker.current_exercise.id == "ex_2"
        assert tracker.session.current_character_index == 1

    def test_session_progress(self, tracker):
        tracker.next_exercise()
        assert tracker.session_progress == pytest.approx(50.0)
        tracker.next_character()
        assert tracker.session_progress == pytest.approx(75.0)
        assert tracker.exercise_progress == pytest.approx(50.0)

    def test_complete_and_reset_exercise(self, tracker, stroke_factory):
        assert tracker.complete_current_exercise() is None

        tracker.add_stroke(stroke_factory([(0, 0), (100, 0)]))
        assert tracker.complete_current_exercise().completed is True

        tracker.reset_current_exercise()
        assert tracker.session.attempts == []
        assert tracker.session.current_character_index == 0

    @pytest.mark.asyncio
    async def test_end_session(self, sample_exercises, stroke_factory, clock):
        save = AsyncMock()
        tracker = PracticeSessionTracker.start(
            sample_exercises,
            user_id="learner",
            autosaver=AttemptAutosaver(save, delay=10),
            clock=clock
        )
        stroke = stroke_factory([(i * 10, 0) for i in range(10)])
        for _ in range(3):
            tracker.add_stroke(stroke)
        clock.advance(minutes=2)

        session = await tracker.end()

        assert session.completed is True
        assert session.completed_at == clock.now
        assert session.overall_accuracy == pytest.approx(69.6)
        assert session.total_time_spent == 120_000
        save.assert_awaited_once()
        assert save.await_args.args[0].completed is True

        with pytest.raises(ValueError):
            tracker.add_stroke(stroke)

    @pytest.mark.asyncio
    async def test_close_is_best_effort(self, sample_exercises, clock):
        save = AsyncMock(side_effect=RuntimeError("offline"))
        tracker = PracticeSessionTracker.start(
            sample_exercises,
            autosaver=AttemptAutosaver(save, delay=10),
            clock=clock
        )

        await tracker.close()

        assert tracker.is_active is False
        assert tracker.autosaver.failures == 1


class TestSessionRegistry:
    """Tests for the open-session registry."""

    @pytest.mark.asyncio
    async def test_add_get_and_close_all(self, sample_exercises, clock):
        save = AsyncMock()
        registry = PracticeSessionRegistry()
        tracker = PracticeSessionTracker.start(
            sample_exercises,
            session_id="s1",
            autosaver=AttemptAutosaver(save, delay=10),
            clock=clock
        )

        registry.add(tracker)
        assert registry.get("s1") is tracker
        assert len(registry) == 1

        await registry.close_all()

        assert len(registry) == 0
        save.assert_awaited_once()

    def test_remove_unknown(self):
        assert PracticeSessionRegistry().remove("missing") is None

    @pytest.mark.asyncio
    async def test_close_saves_unfinished_attempt(self, sample_exercises, stroke_factory, clock):
        save = AsyncMock()
        registry = PracticeSessionRegistry()
        tracker = PracticeSessionTracker.start(
            sample_exercises,
            session_id="s1",
            autosaver=AttemptAutosaver(save, delay=10),
            clock=clock
        )
        registry.add(tracker)
        tracker.add_stroke(stroke_factory([(0, 0), (100, 0)]))

        closed = await registry.close("s1")

        assert closed is tracker
        assert closed.is_active is False
        assert len(registry) == 0
        saved = save.await_args.args[0]
        assert saved.completed is False
        assert len(saved.attempts) == 1
        assert saved.attempts[0].completed is False

    @pytest.mark.asyncio
    async def test_close_unknown(self):
        assert await PracticeSessionRegistry().close("missing") is None
