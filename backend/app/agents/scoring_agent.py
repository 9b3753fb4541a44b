"""
Scoring Agent
Records a submitted practice attempt.

Responsibilities:
- Find or create the learner and the practice session
- Summarize the submitted strokes (speed, length, stroke types)
- Store the attempt with its stroke data and summary
"""
import logging
import uuid

from app.agents.base_agent import BaseAgent
from app.agents.state import AppState, add_agent_message
from app.models.practice import StoredAttempt
from app.models.stroke import Stroke
from app.utils.stroke_analysis import summarize_strokes


logger = logging.getLogger(__name__)


class ScoringAgent(BaseAgent[AppState]):
    """
    Scoring Agent for attempt submission.

    The accuracy is the one reported by the client; the agent adds the
    geometry summary so stored attempts can be inspected later.
    """

    @property
    def name(self) -> str:
        return "scoring"

    @property
    def description(self) -> str:
        return "Stores practice attempts together with their stroke geometry summary"

    async def process(self, state: AppState) -> AppState:
        """Process an attempt submission"""
        attempt = state["attempt"]
        self.log_start({
            "username": state["user"]["username"],
            "character_id": attempt.get("character_id")
        })

        try:
            user = await self.db_service.find_or_create_user(state["user"]["username"])
            user_id = user["id"]
            state["user"]["user_id"] = user_id
            state["user"]["name"] = user.get("name", user_id)

            await self.db_service.get_or_create_session(user_id, attempt["session_id"])

            strokes = [Stroke.model_validate(stroke) for stroke in attempt.get("strokes", [])]
            summary = summarize_strokes(strokes)

            stored = StoredAttempt(
                id=str(uuid.uuid4()),
                user_id=user_id,
                session_id=attempt["session_id"],
                exercise_id=attempt["exercise_id"],
                character_id=attempt["character_id"],
                accuracy=float(attempt["accuracy"]),
                time_spent_ms=int(attempt.get("time_spent_ms") or 0),
                stroke_count=len(strokes),
                strokes=[stroke.to_dict() for stroke in strokes],
                stroke_summary=summary.model_dump(),
                canvas_snapshot=attempt.get("canvas_snapshot"),
                difficulty_level=attempt.get("difficulty_level") or 1,
                exercise_type=attempt.get("exercise_type") or "character"
            )
            result = await self.db_service.create_attempt(user_id, stored.to_dict())

            attempt["attempt_id"] = result.get("id", stored.id)
            attempt["stroke_summary"] = summary.model_dump()

            state = add_agent_message(
                state,
                self.name,
                f"Attempt stored for {attempt['character_id']}",
                {"accuracy": stored.accuracy, "strokes": stored.stroke_count}
            )
            self.log_complete({"attempt_id": attempt["attempt_id"]})
            return state

        except ValueError as e:
            return self.fail(state, e, status_code=400)
        except Exception as e:
            return self.fail(state, e)


# Singleton instance
scoring_agent = ScoringAgent()
