"""
Progression Agent
Drives endless mode.

Responsibilities:
- Load (or start) the learner's progression state
- Generate batches of single-character exercises from the current level
- Record results, mark mastered characters and advance levels
- Persist the progression state after every change
"""
import logging
import random
import uuid

from app.agents.base_agent import BaseAgent
from app.agents.state import AppState, add_agent_message
from app.models.character import Character
from app.models.exercise import Exercise, ExerciseType
from app.models.progress import ProgressionState
from app.utils.progression import LearningProgression, MAX_LEVEL


logger = logging.getLogger(__name__)


class ProgressionAgent(BaseAgent[AppState]):
    """
    Progression Agent for endless mode.

    Anonymous requests (no username) work on a throwaway state built from the
    requested level and are never persisted.
    """

    def __init__(self, *args, rng: random.Random | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "progression"

    @property
    def description(self) -> str:
        return "Selects endless-mode characters by frequency level and tracks level advancement"

    async def process(self, state: AppState) -> AppState:
        """Process an endless-mode request"""
        self.log_start({
            "user_id": state["user"]["user_id"],
            "request_type": state.get("request_type")
        })

        try:
            if state.get("request_type") == "endless_result":
                return await self._record_result(state)
            return await self._generate_exercises(state)
        except ValueError as e:
            return self.fail(state, e, status_code=400)
        except Exception as e:
            return self.fail(state, e)

    async def _load_progression(self, state: AppState) -> LearningProgression:
        user_id = state["user"]["user_id"]
        requested_level = state["progression"].get("level")

        stored = await self.db_service.get_progression_state(user_id) if user_id else None
        if stored:
            progression_state = ProgressionState.from_dict(stored)
        else:
            progression_state = ProgressionState(
                user_id=user_id or None,
                current_level=min(max(requested_level or 1, 1), MAX_LEVEL),
                mastery_threshold=self.settings.PROGRESSION_MASTERY_THRESHOLD,
                advancement_threshold=self.settings.PROGRESSION_ADVANCEMENT_THRESHOLD
            )

        return LearningProgression(progression_state, rng=self.rng)

    async def _save_progression(self, state: AppState, progression: LearningProgression):
        user_id = state["user"]["user_id"]
        if user_id:
            await self.db_service.save_progression_state(user_id, progression.state.to_dict())

    async def _generate_exercises(self, state: AppState) -> AppState:
        """
        Build a shuffled batch of single-character exercises.

        Twice the requested count is selected so the shuffle has room to vary
        the batch; characters missing from the database are skipped.
        """
        count = state["progression"].get("count") or 10
        if count < 1:
            raise ValueError("count must be positive")

        progression = await self._load_progression(state)
        level_before = progression.state.current_level

        candidates = progression.generate_endless_exercises(practice_count=count * 2, review_count=0)
        chosen = candidates[:count]

        documents = await self.db_service.list_characters(traditional=chosen)
        by_traditional = {doc["traditional"]: Character.from_dict(doc) for doc in documents}

        exercises = [
            self._build_exercise(by_traditional[char])
            for char in chosen
            if char in by_traditional
        ]
        self.rng.shuffle(exercises)

        if progression.state.current_level != level_before:
            await self._save_progression(state, progression)

        stats = progression.get_progression_stats()
        exercise_dicts = [exercise.model_dump() for exercise in exercises]

        state["progression"]["characters"] = chosen
        state["progression"]["exercises"] = exercise_dicts
        state["progression"]["stats"] = stats.model_dump()
        state["progression"]["level_advanced"] = progression.state.current_level != level_before

        state["response"] = {
            "type": "endless_exercises",
            "exercises": exercise_dicts,
            "progression": stats.model_dump(),
            "has_more": True,
            "total_available": len(exercise_dicts)
        }

        state = add_agent_message(
            state,
            self.name,
            f"Generated {len(exercise_dicts)} exercises at level {stats.current_level}",
            {"requested": count, "missing": len(chosen) - len(exercise_dicts)}
        )
        self.log_complete({"exercises": len(exercise_dicts), "level": stats.current_level})
        return state

    async def _record_result(self, state: AppState) -> AppState:
        """Feed one endless-mode result to the selector."""
        character = state["progression"].get("character")
        accuracy = state["progression"].get("accuracy")
        if not character or accuracy is None:
            raise ValueError("character and accuracy are required")

        progression = await self._load_progression(state)
        completed = progression.mark_completed(character, accuracy)

        level_advanced = False
        if progression.can_advance_level():
            level_advanced = progression.advance_level()

        await self._save_progression(state, progression)
        stats = progression.get_progression_stats()

        state["progression"]["character_completed"] = completed
        state["progression"]["level_advanced"] = level_advanced
        state["progression"]["stats"] = stats.model_dump()

        # Known learners also get their spaced repetition record updated
        if state["user"].get("registered"):
            document = await self.db_service.get_character_by_traditional(character)
            if document:
                state["attempt"] = {
                    "character_id": document["id"],
                    "accuracy": accuracy
                }

        state["response"] = {
            "type": "endless_result",
            "success": True,
            "character_completed": completed,
            "level_advanced": level_advanced,
            "progression": stats.model_dump()
        }

        state = add_agent_message(
            state,
            self.name,
            f"Result recorded for {character}",
            {"completed": completed, "level_advanced": level_advanced}
        )
        self.log_complete({"level": stats.current_level, "level_advanced": level_advanced})
        return state

    def _build_exercise(self, character: Character) -> Exercise:
        return Exercise(
            id=f"endless-{character.traditional}-{uuid.uuid4().hex[:9]}",
            type=ExerciseType.CHARACTER,
            title=f"Practice: {character.traditional}",
            description=f"Learn to write {character.traditional} - {character.english}",
            difficulty=character.difficulty,
            total_strokes=character.stroke_count,
            jyutping=character.jyutping,
            english=character.english,
            characters=[character]
        )


# Singleton instance
progression_agent = ProgressionAgent()
