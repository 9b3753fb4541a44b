"""
Spaced Repetition System (SRS) Algorithm
Schedules the next review of a character from a learner's recent accuracies.

Each completed attempt updates a rolling accuracy history and a streak of
good attempts, then derives:
- the delay until the next review (short while the average is weak,
  exponential in the streak once it is solid)
- a mastery level from 0 to 5

Mastery Level Scale:
0 - New or struggling
1 - Average >= 60 with a streak of 1
2 - Average >= 75 with a streak of 2
3 - Average >= 85 with a streak of 3
4 - Average >= 90 with a streak of 4
5 - Average >= 95 with a streak of 5
"""
import math
from datetime import datetime, timedelta
from typing import Optional

from app.config import settings
from app.models.progress import UserProgress


# (minimum average, minimum streak, level), highest first
MASTERY_LEVELS = [
    (95, 5, 5),
    (90, 4, 4),
    (85, 3, 3),
    (75, 2, 2),
    (60, 1, 1),
]

WEAK_AVERAGE = 60
FAIR_AVERAGE = 80


class SpacedRepetitionScheduler:
    """
    Accuracy-driven review scheduler.

    The scheduler is stateless: it reads the previous UserProgress and returns
    a new one, so callers decide when to persist.
    """

    def __init__(self):
        self.history_window = settings.SRS_HISTORY_WINDOW
        self.streak_threshold = settings.SRS_STREAK_THRESHOLD
        self.base_delay = timedelta(hours=settings.SRS_BASE_DELAY_HOURS)
        self.max_multiplier = settings.SRS_MAX_INTERVAL_MULTIPLIER
        self.high_priority_days = settings.SRS_OVERDUE_HIGH_PRIORITY_DAYS

    def calculate(
        self,
        progress: Optional[UserProgress],
        accuracy: float,
        user_id: Optional[str] = None,
        character_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> UserProgress:
        """
        Apply one completed attempt to a character's progress.

        Args:
            progress: Current progress, or None for a first attempt
            accuracy: Attempt accuracy (0-100)
            user_id: Owner, required when progress is None
            character_id: Character, required when progress is None
            now: Reference time (default: utcnow)

        Returns:
            Updated UserProgress

        Raises:
            ValueError: If accuracy is not a number in [0, 100]
        """
        self._validate_accuracy(accuracy)
        now = now or datetime.utcnow()

        if progress is None:
            if user_id is None or character_id is None:
                raise ValueError("user_id and character_id are required for new progress")
            progress = UserProgress(user_id=user_id, character_id=character_id)

        history = (progress.accuracy_history + [accuracy])[-self.history_window:]
        streak = progress.streak + 1 if accuracy >= self.streak_threshold else 0
        average = sum(history) / len(history)

        return UserProgress(
            user_id=progress.user_id,
            character_id=progress.character_id,
            accuracy_history=history,
            total_attempts=progress.total_attempts + 1,
            streak=streak,
            mastery_level=self.mastery_level(average, streak),
            last_practiced=now,
            next_review=now + self.next_review_delay(average, streak)
        )

    def next_review_delay(self, average_accuracy: float, streak: int) -> timedelta:
        """
        Delay until the next review.

        Half a day while the average is below 60, one day below 80,
        otherwise one day times 2^streak capped at the max multiplier.
        """
        if average_accuracy < WEAK_AVERAGE:
            return self.base_delay * 0.5
        if average_accuracy < FAIR_AVERAGE:
            return self.base_delay
        return self.base_delay * min(2 ** streak, self.max_multiplier)

    def mastery_level(self, average_accuracy: float, streak: int) -> int:
        """First matching row of the mastery table, 0 if none."""
        for min_average, min_streak, level in MASTERY_LEVELS:
            if average_accuracy >= min_average and streak >= min_streak:
                return level
        return 0

    def is_due_for_review(self, progress: UserProgress, now: Optional[datetime] = None) -> bool:
        """Check if a character is due for review."""
        if progress.next_review is None:
            return True
        return (now or datetime.utcnow()) >= progress.next_review

    def days_until_review(self, progress: UserProgress, now: Optional[datetime] = None) -> int:
        """Get days until next review (negative if overdue)."""
        if progress.next_review is None:
            return 0
        delta = progress.next_review - (now or datetime.utcnow())
        return delta.days

    def get_priority(self, progress: UserProgress, now: Optional[datetime] = None) -> str:
        """
        Get review priority based on how overdue the character is.

        Returns:
            'high' if very overdue, 'normal' if due, 'low' if not due yet
        """
        if not self.is_due_for_review(progress, now):
            return "low"

        days = self.days_until_review(progress, now)
        if days < -self.high_priority_days:
            return "high"
        return "normal"

    @staticmethod
    def _validate_accuracy(accuracy: float) -> None:
        if isinstance(accuracy, bool) or not isinstance(accuracy, (int, float)):
            raise ValueError(f"accuracy must be a number, got {accuracy!r}")
        if math.isnan(accuracy) or not 0 <= accuracy <= 100:
            raise ValueError(f"accuracy must be within 0-100, got {accuracy}")


# Singleton instance
srs_scheduler = SpacedRepetitionScheduler()
