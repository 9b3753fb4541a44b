"""
Pytest configuration and fixtures for tests.
"""
import pytest
from unittest.mock import AsyncMock
from datetime import datetime, timedelta

from app.config import Settings
from app.models.character import Character
from app.models.exercise import Exercise
from app.models.stroke import Point, Stroke


@pytest.fixture
def test_settings():
    """Settings with the defaults tests are written against."""
    return Settings(
        COSMOS_DB_ENDPOINT="https://test.documents.azure.com",
        COSMOS_DB_KEY="test-cosmos-key",
        COSMOS_DB_DATABASE_NAME="test_db",
        PREFERENCES_FILE=None
    )


@pytest.fixture
def sample_user_data():
    """Sample user document."""
    return {
        "id": "learner",
        "username": "learner",
        "name": "learner",
        "email": None,
        "isGuest": False,
        "createdAt": datetime.utcnow().isoformat()
    }


@pytest.fixture
def sample_character_data():
    """Sample character document for 大."""
    return {
        "id": "char_da",
        "traditional": "大",
        "simplified": "大",
        "jyutping": "daai6",
        "english": "big",
        "strokeCount": 3,
        "frequency": 12,
        "difficulty": 1,
        "strokePatterns": [
            {
                "strokeOrder": 2,
                "pathData": [{"x": 150, "y": 50}, {"x": 80, "y": 250}],
                "strokeType": "left-falling"
            },
            {
                "strokeOrder": 1,
                "pathData": [{"x": 50, "y": 120}, {"x": 250, "y": 120}],
                "strokeType": "horizontal"
            },
            {
                "strokeOrder": 3,
                "pathData": [{"x": 150, "y": 120}, {"x": 240, "y": 250}],
                "strokeType": "right-falling"
            }
        ]
    }


@pytest.fixture
def sample_exercise_data():
    """Sample exercise document referencing 大."""
    return {
        "id": "ex_da",
        "type": "character",
        "title": "Practice: 大",
        "description": "Learn to write 大 - big",
        "difficulty": 1,
        "totalStrokes": 3,
        "jyutping": "daai6",
        "english": "big",
        "exerciseCharacters": [{"characterId": "char_da", "orderIndex": 0}]
    }


@pytest.fixture
def sample_character(sample_character_data):
    return Character.from_dict(sample_character_data)


@pytest.fixture
def sample_exercises(sample_character):
    """Two exercises: a one-character one and a two-character phrase."""
    second = sample_character.model_copy(update={"id": "char_jan", "traditional": "人", "stroke_count": 2})
    return [
        Exercise(id="ex_1", title="Practice: 大", difficulty=1, total_strokes=3, characters=[sample_character]),
        Exercise(
            id="ex_2",
            type="phrase",
            title="大人",
            difficulty=2,
            total_strokes=5,
            characters=[sample_character, second]
        )
    ]


def make_stroke(points: list[tuple[float, float]], start_time: int = 0, duration: int = 200) -> Stroke:
    """Build a stroke with evenly spaced timestamps."""
    step = duration // max(1, len(points) - 1)
    return Stroke(
        path=[
            Point(x=x, y=y, timestamp=start_time + index * step)
            for index, (x, y) in enumerate(points)
        ],
        start_time=start_time,
        end_time=start_time + duration
    )


@pytest.fixture
def horizontal_stroke():
    return make_stroke([(0, 0), (50, 2), (100, 4)])


@pytest.fixture
def sample_progress_data():
    """Sample stored progress record."""
    return {
        "id": "progress_learner_char_da",
        "userId": "learner",
        "characterId": "char_da",
        "accuracyHistory": [70, 80, 90],
        "totalAttempts": 3,
        "streak": 2,
        "masteryLevel": 2,
        "averageAccuracy": 80.0,
        "lastPracticed": (datetime.utcnow() - timedelta(days=2)).isoformat(),
        "nextReview": (datetime.utcnow() - timedelta(days=1)).isoformat()
    }


@pytest.fixture
def mock_cosmos_service(sample_user_data, sample_character_data, sample_exercise_data):
    """Mock Cosmos DB service."""
    service = AsyncMock()

    # Users
    service.get_user.return_value = sample_user_data
    service.get_user_by_username.return_value = sample_user_data
    service.find_or_create_user.return_value = sample_user_data

    # Reference data
    service.get_character.return_value = sample_character_data
    service.get_character_by_traditional.return_value = sample_character_data
    service.list_characters.return_value = [sample_character_data]
    service.list_exercises.return_value = [sample_exercise_data]

    # Sessions and attempts
    service.get_or_create_session.return_value = {"id": "session_1", "userId": "learner"}
    service.save_session.return_value = {}
    service.update_session_stats.return_value = {}
    service.create_attempt.side_effect = lambda user_id, data: data
    service.get_attempts.return_value = []
    service.get_attempt_totals.return_value = {"total_attempts": 0, "average_accuracy": 0.0}

    # Progress
    service.get_user_progress.return_value = None
    service.upsert_user_progress.side_effect = lambda user_id, character_id, data: data
    service.get_progress_due_for_review.return_value = []

    # Progression
    service.get_progression_state.return_value = None
    service.save_progression_state.side_effect = lambda user_id, data: data

    return service


@pytest.fixture
def stroke_factory():
    """Factory for strokes from (x, y) points."""
    return make_stroke
