"""
Scheduler Agent
Applies spaced repetition after a completed attempt.

Responsibilities:
- Update the (user, character) progress record: history, streak, mastery
- Schedule the next review
- Refresh the practice session's overall accuracy and time
"""
import logging

from app.agents.base_agent import BaseAgent
from app.agents.state import AppState, add_agent_message
from app.models.progress import UserProgress
from app.utils.srs_algorithm import SpacedRepetitionScheduler, srs_scheduler


logger = logging.getLogger(__name__)


class SchedulerAgent(BaseAgent[AppState]):
    """
    Scheduler Agent for spaced repetition updates.

    Works on ``state["attempt"]``; the attempt must carry a character id and
    an accuracy. A session id is optional (endless-mode results have none).
    """

    def __init__(self, *args, scheduler: SpacedRepetitionScheduler | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.scheduler = scheduler or srs_scheduler

    @property
    def name(self) -> str:
        return "scheduler"

    @property
    def description(self) -> str:
        return "Updates spaced repetition progress and schedules the next review"

    async def process(self, state: AppState) -> AppState:
        """Process a completed attempt"""
        attempt = state["attempt"]
        user_id = state["user"]["user_id"]
        self.log_start({"user_id": user_id, "character_id": attempt.get("character_id")})

        try:
            updated = await self._update_progress(user_id, attempt["character_id"], attempt["accuracy"])
            state["progress"]["updated"] = updated.to_dict()

            session_id = attempt.get("session_id")
            if session_id:
                await self.db_service.update_session_stats(user_id, session_id)

            if state.get("request_type") == "submit_attempt":
                state["response"] = {
                    "type": "attempt",
                    "success": True,
                    "attempt_id": attempt.get("attempt_id"),
                    "message": "Practice attempt saved successfully",
                    "progress": state["progress"]["updated"],
                    "stroke_summary": attempt.get("stroke_summary", {})
                }
            else:
                state["response"]["progress"] = state["progress"]["updated"]

            state = add_agent_message(
                state,
                self.name,
                f"Next review of {attempt['character_id']} at {updated.next_review.isoformat()}",
                {"streak": updated.streak, "mastery_level": updated.mastery_level}
            )
            self.log_complete({
                "mastery_level": updated.mastery_level,
                "next_review": updated.next_review.isoformat()
            })
            return state

        except ValueError as e:
            return self.fail(state, e, status_code=400)
        except Exception as e:
            return self.fail(state, e)

    async def _update_progress(self, user_id: str, character_id: str, accuracy: float) -> UserProgress:
        """Load, update and store a character's progress record."""
        existing = await self.db_service.get_user_progress(user_id, character_id)
        current = UserProgress.from_dict(existing) if existing else None

        updated = self.scheduler.calculate(
            current,
            float(accuracy),
            user_id=user_id,
            character_id=character_id
        )
        await self.db_service.upsert_user_progress(user_id, character_id, updated.to_dict())

        self.log_debug("Progress updated", {
            "character_id": character_id,
            "average_accuracy": round(updated.average_accuracy, 2),
            "streak": updated.streak
        })
        return updated


# Singleton instance
scheduler_agent = SchedulerAgent()
