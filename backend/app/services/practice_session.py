"""
Practice Session Service
Tracks one learner's in-progress session: navigation across exercises and
characters, per-character attempts scored as strokes arrive, and debounced
persistence of the session state.
"""
import asyncio
import logging
import uuid
from datetime import datetime
from typing import Awaitable, Callable, Optional

from app.config import settings
from app.models.character import Character
from app.models.exercise import Exercise
from app.models.practice import PracticeAttempt, PracticeSession
from app.models.stroke import Stroke
from app.utils.accuracy import score_attempt

logger = logging.getLogger(__name__)

SaveCallback = Callable[[PracticeSession], Awaitable[None]]


class AttemptAutosaver:
    """
    Debounced writer for session snapshots.

    Every ``schedule`` call restarts the timer, so only the latest snapshot is
    written once the learner has been idle for ``delay`` seconds. Superseded
    snapshots are never written. ``flush`` writes immediately.
    """

    def __init__(self, save: SaveCallback, delay: Optional[float] = None):
        self._save = save
        self.delay = settings.AUTOSAVE_DEBOUNCE_SECONDS if delay is None else delay
        self._pending: Optional[PracticeSession] = None
        self._timer: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self.saves = 0
        self.failures = 0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, session: PracticeSession):
        """Queue a snapshot and restart the idle timer. Needs a running loop."""
        self._pending = session.model_copy(deep=True)
        self._cancel_timer()
        self._timer = asyncio.create_task(self._save_when_idle())

    async def flush(self) -> bool:
        """Write the pending snapshot now; returns whether a write succeeded."""
        self._cancel_timer()
        return await self._write()

    async def close(self, final_state: Optional[PracticeSession] = None) -> bool:
        """Flush a last snapshot (the given one, else whatever is pending)."""
        if final_state is not None:
            self._pending = final_state.model_copy(deep=True)
        return await self.flush()

    def _cancel_timer(self):
        if self._timer and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _save_when_idle(self):
        await asyncio.sleep(self.delay)
        # Detach so a flush during the write does not cancel it
        self._timer = None
        await self._write()

    async def _write(self) -> bool:
        async with self._lock:
            session, self._pending = self._pending, None
            if session is None:
                return False
            try:
                await self._save(session)
                self.saves += 1
                logger.debug(f"Autosaved session {session.id}")
                return True
            except Exception as e:
                # The in-memory session is untouched; the next save carries its state
                self.failures += 1
                logger.error(f"Autosave failed for session {session.id}: {e}")
                return False


class PracticeSessionTracker:
    """
    Owner of a single in-progress PracticeSession.

    Attempts are keyed by (exercise id, character id). All mutation goes
    through this class, so no locking is needed around the session.
    """

    def __init__(
        self,
        session: PracticeSession,
        autosaver: Optional[AttemptAutosaver] = None,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.session = session
        self.autosaver = autosaver
        self.clock = clock
        self.is_active = not session.completed
        self._exercise_started_at = clock()

    @classmethod
    def start(
        cls,
        exercises: list[Exercise],
        user_id: str = "guest",
        session_id: Optional[str] = None,
        endless_mode: bool = False,
        autosaver: Optional[AttemptAutosaver] = None,
        clock: Callable[[], datetime] = datetime.utcnow
    ) -> "PracticeSessionTracker":
        """Start a session over the given exercises."""
        if not exercises:
            raise ValueError("Cannot start a session without exercises")

        session = PracticeSession(
            id=session_id or f"session_{uuid.uuid4().hex}",
            user_id=user_id,
            exercises=exercises,
            endless_mode=endless_mode,
            started_at=clock()
        )
        logger.info(f"Session {session.id} started with {len(exercises)} exercises")
        return cls(session, autosaver=autosaver, clock=clock)

    # ==================== CURRENT POSITION ====================

    @property
    def current_exercise(self) -> Optional[Exercise]:
        index = self.session.current_exercise_index
        if index < len(self.session.exercises):
            return self.session.exercises[index]
        return None

    @property
    def current_character(self) -> Optional[Character]:
        exercise = self.current_exercise
        if exercise and self.session.current_character_index < len(exercise.characters):
            return exercise.characters[self.session.current_character_index]
        return None

    @property
    def current_attempt(self) -> Optional[PracticeAttempt]:
        exercise, character = self.current_exercise, self.current_character
        if not exercise or not character:
            return None
        return self._find_attempt(exercise.id, character.id)

    @property
    def session_progress(self) -> float:
        """Percent of the session done; always 0 in endless mode."""
        exercise = self.current_exercise
        if self.session.endless_mode or not exercise:
            return 0.0
        within = self.session.current_character_index / max(1, len(exercise.characters))
        return (self.session.current_exercise_index + within) / len(self.session.exercises) * 100

    @property
    def exercise_progress(self) -> float:
        exercise = self.current_exercise
        if not exercise or not exercise.characters:
            return 0.0
        return self.session.current_character_index / len(exercise.characters) * 100

    # ==================== DRAWING ====================

    def add_stroke(self, stroke: Stroke) -> PracticeAttempt:
        """
        Append a stroke to the current character's attempt and rescore it.

        Raises:
            ValueError: If the session has ended or has no current character
        """
        exercise, character = self._require_position()
        now = self.clock()
        elapsed_ms = max(0, int((now - self._exercise_started_at).total_seconds() * 1000))

        attempt = self._find_attempt(exercise.id, character.id)
        if attempt is None:
            attempt = PracticeAttempt(
                exercise_id=exercise.id,
                character_id=character.id,
                created_at=now
            )
            self.session.attempts.append(attempt)

        attempt.strokes.append(stroke)
        attempt.accuracy = score_attempt(attempt.strokes, character.stroke_count)
        attempt.time_spent_ms = elapsed_ms
        self.session.total_time_spent = self._elapsed_session_ms(now)

        self._autosave()
        return attempt

    def save_snapshot(self, data_url: str) -> Optional[PracticeAttempt]:
        """Attach a canvas snapshot to the current attempt, if there is one."""
        attempt = self.current_attempt
        if attempt is None:
            return None
        attempt.canvas_snapshot = data_url
        self._autosave()
        return attempt

    # ==================== NAVIGATION ====================

    def next_character(self) -> bool:
        exercise = self.current_exercise
        if not exercise:
            return False
        if self.session.current_character_index + 1 < len(exercise.characters):
            self.session.current_character_index += 1
            self._restart_exercise_clock()
            return True
        return False

    def next_exercise(self, more_exercises: Optional[list[Exercise]] = None) -> bool:
        """
        Move to the next exercise's first character.

        In endless mode ``more_exercises`` is appended when the end is reached;
        otherwise the session cycles back to the first exercise.
        """
        next_index = self.session.current_exercise_index + 1
        if next_index >= len(self.session.exercises):
            if self.session.endless_mode and more_exercises:
                self.session.exercises.extend(more_exercises)
            else:
                next_index = 0

        self.session.current_exercise_index = next_index
        self.session.current_character_index = 0
        self._restart_exercise_clock()
        return True

    def previous_character(self) -> bool:
        if self.session.current_character_index > 0:
            self.session.current_character_index -= 1
            self._restart_exercise_clock()
            return True
        return False

    def previous_exercise(self) -> bool:
        """Move to the last character of the previous exercise."""
        previous_index = self.session.current_exercise_index - 1
        if previous_index < 0:
            return False

        previous = self.session.exercises[previous_index]
        self.session.current_exercise_index = previous_index
        self.session.current_character_index = max(0, len(previous.characters) - 1)
        self._restart_exercise_clock()
        return True

    # ==================== EXERCISE MANAGEMENT ====================

    def complete_current_exercise(self) -> Optional[PracticeAttempt]:
        """Mark the current character's attempt completed and return it."""
        attempt = self.current_attempt
        if attempt is None:
            return None
        attempt.completed = True
        self._autosave()
        return attempt

    def reset_current_exercise(self):
        """Drop every attempt of the current exercise and go back to its first character."""
        exercise = self.current_exercise
        if not exercise:
            return
        self.session.attempts = [
            attempt for attempt in self.session.attempts
            if attempt.exercise_id != exercise.id
        ]
        self.session.current_character_index = 0
        self._restart_exercise_clock()

    async def end(self) -> PracticeSession:
        """Complete the session and write it out."""
        now = self.clock()
        self.session.completed = True
        self.session.completed_at = now
        self.session.total_time_spent = self._elapsed_session_ms(now)
        self.session.overall_accuracy = self.overall_accuracy()
        self.is_active = False

        if self.autosaver:
            await self.autosaver.close(self.session)

        logger.info(
            f"Session {self.session.id} completed: "
            f"{len(self.session.attempts)} attempts, {self.session.overall_accuracy:.1f}% accuracy"
        )
        return self.session

    async def close(self):
        """Best-effort save of an unfinished session when the learner leaves."""
        if not self.is_active:
            return
        self.session.total_time_spent = self._elapsed_session_ms(self.clock())
        self.is_active = False
        if self.autosaver:
            await self.autosaver.close(self.session)

    def overall_accuracy(self) -> float:
        if not self.session.attempts:
            return 0.0
        return sum(attempt.accuracy for attempt in self.session.attempts) / len(self.session.attempts)

    # ==================== HELPERS ====================

    def _find_attempt(self, exercise_id: str, character_id: str) -> Optional[PracticeAttempt]:
        for attempt in self.session.attempts:
            if attempt.exercise_id == exercise_id and attempt.character_id == character_id:
                return attempt
        return None

    def _require_position(self) -> tuple[Exercise, Character]:
        if not self.is_active:
            raise ValueError(f"Session {self.session.id} is not active")
        exercise, character = self.current_exercise, self.current_character
        if not exercise or not character:
            raise ValueError(f"Session {self.session.id} has no current character")
        return exercise, character

    def _restart_exercise_clock(self):
        self._exercise_started_at = self.clock()

    def _elapsed_session_ms(self, now: datetime) -> int:
        return max(0, int((now - self.session.started_at).total_seconds() * 1000))

    def _autosave(self):
        if self.autosaver:
            self.autosaver.schedule(self.session)


class PracticeSessionRegistry:
    """In-memory trackers for the sessions currently open on this server"""

    def __init__(self):
        self._trackers: dict[str, PracticeSessionTracker] = {}

    def add(self, tracker: PracticeSessionTracker):
        self._trackers[tracker.session.id] = tracker

    def get(self, session_id: str) -> Optional[PracticeSessionTracker]:
        return self._trackers.get(session_id)

    def remove(self, session_id: str) -> Optional[PracticeSessionTracker]:
        return self._trackers.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._trackers)

    async def close(self, session_id: str) -> Optional[PracticeSessionTracker]:
        """Save an unfinished session and forget it; None if it is not open."""
        tracker = self._trackers.pop(session_id, None)
        if tracker:
            await tracker.close()
        return tracker

    async def close_all(self):
        """Flush every open session, e.g. on shutdown."""
        for session_id in list(self._trackers):
            tracker = self._trackers.pop(session_id)
            await tracker.close()


# Singleton instance
session_registry = PracticeSessionRegistry()
