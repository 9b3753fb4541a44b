"""
Progress Agent
Reports a learner's practice progress.

Responsibilities:
- Collect per-character spaced repetition records
- Collect recent attempts
- Aggregate totals: attempts, accuracy, learned, mastered, due for review
"""
import logging
from datetime import datetime

from app.agents.base_agent import BaseAgent
from app.agents.state import AppState, add_agent_message
from app.models.progress import ProgressStats, UserProgress
from app.utils.srs_algorithm import SpacedRepetitionScheduler, srs_scheduler


logger = logging.getLogger(__name__)


class ProgressAgent(BaseAgent[AppState]):
    """
    Progress Agent for the learner dashboard.

    Each progress record is returned together with its review priority.
    """

    def __init__(self, *args, scheduler: SpacedRepetitionScheduler | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.scheduler = scheduler or srs_scheduler

    @property
    def name(self) -> str:
        return "progress"

    @property
    def description(self) -> str:
        return "Aggregates attempts and spaced repetition progress into dashboard statistics"

    async def process(self, state: AppState) -> AppState:
        """Process progress request"""
        self.log_start({"user_id": state["user"]["user_id"]})

        try:
            return await self._get_overall_progress(state)
        except LookupError as e:
            return self.fail(state, e, status_code=404)
        except Exception as e:
            return self.fail(state, e)

    async def _get_overall_progress(self, state: AppState) -> AppState:
        user_id = state["user"]["user_id"]
        self.log_debug("Getting overall progress", {"user_id": user_id})

        user = await self.db_service.get_user(user_id)
        if not user:
            raise LookupError(f"User not found: {user_id}")

        records = await self.db_service.get_user_progress(user_id) or []
        recent_attempts = await self.db_service.get_attempts(
            user_id,
            limit=self.settings.RECENT_ATTEMPTS_LIMIT
        )
        totals = await self.db_service.get_attempt_totals(user_id)
        due = await self.db_service.get_progress_due_for_review(user_id)

        now = datetime.utcnow()
        for record in records:
            record["priority"] = self.scheduler.get_priority(UserProgress.from_dict(record), now)

        stats = ProgressStats(
            total_attempts=totals["total_attempts"],
            average_accuracy=totals["average_accuracy"],
            characters_learned=len(records),
            mastered_characters=sum(
                1 for record in records
                if record.get("masteryLevel", 0) >= self.settings.MASTERED_CHARACTER_LEVEL
            ),
            due_for_review=len(due)
        )

        state["progress"]["records"] = records
        state["progress"]["recent_attempts"] = recent_attempts
        state["progress"]["stats"] = stats.model_dump()

        state["response"] = {
            "type": "progress",
            "username": user.get("username", user_id),
            "progress": records,
            "recent_attempts": recent_attempts,
            "stats": stats.model_dump(),
            "message": (
                f"{stats.characters_learned} characters learned, "
                f"{stats.due_for_review} due for review"
            )
        }

        state = add_agent_message(
            state,
            self.name,
            "Progress collected",
            {"characters_learned": stats.characters_learned}
        )
        self.log_complete({"total_attempts": stats.total_attempts})
        return state


# Singleton instance
progress_agent = ProgressAgent()
