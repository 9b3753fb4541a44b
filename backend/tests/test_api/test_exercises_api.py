"""
Tests for Exercises API endpoints.
"""
import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from app.main import app


client = TestClient(app)


PROGRESSION = {
    "current_level": 1,
    "level_name": "Foundation",
    "total_mastered": 0,
    "mastered_in_current_level": 0,
    "total_in_current_level": 10,
    "level_progress": 0.0,
    "can_advance": False
}


@pytest.fixture
def mock_run_orchestrator():
    """Mock the run_orchestrator function."""
    with patch("app.api.v1.endpoints.exercises.run_orchestrator", new_callable=AsyncMock) as mock:
        yield mock


@pytest.fixture
def mock_cosmos_db(sample_character_data, sample_exercise_data):
    """Mock the cosmos db service with two exercises."""
    harder = dict(sample_exercise_data, id="ex_hard", difficulty=3, title="Hard")
    with patch("app.api.v1.endpoints.exercises.cosmos_db_service") as mock:
        mock.list_exercises = AsyncMock(return_value=[harder, sample_exercise_data])
        mock.list_characters = AsyncMock(return_value=[sample_character_data])
        yield mock


class TestListExercises:
    """Tests for GET /exercises"""

    def test_exercises_ordered_by_difficulty(self, mock_cosmos_db):
        response = client.get("/api/v1/exercises")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [exercise["id"] for exercise in data["exercises"]] == ["ex_da", "ex_hard"]

    def test_characters_are_resolved(self, mock_cosmos_db):
        response = client.get("/api/v1/exercises")

        character = response.json()["exercises"][0]["characters"][0]
        assert character["traditional"] == "大"
        assert [stroke["stroke_order"] for stroke in character["strokes"]] == [1, 2, 3]

    def test_database_failure(self, mock_cosmos_db):
        mock_cosmos_db.list_exercises.side_effect = RuntimeError("unavailable")

        response = client.get("/api/v1/exercises")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch exercises"


class TestEndlessExercises:
    """Tests for GET /exercises/endless"""

    def test_get_batch(self, mock_run_orchestrator):
        mock_run_orchestrator.return_value = {
            "has_error": False,
            "response": {
                "exercises": [{
                    "id": "endless-一-abc123def",
                    "type": "character",
                    "title": "Practice: 一",
                    "difficulty": 1,
                    "total_strokes": 1,
                    "characters": []
                }],
                "progression": PROGRESSION,
                "has_more": True,
                "total_available": 1
            }
        }

        response = client.get("/api/v1/exercises/endless", params={"level": 2, "count": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["has_more"] is True
        assert data["exercises"][0]["title"] == "Practice: 一"
        assert data["progression"]["level_name"] == "Foundation"
        mock_run_orchestrator.assert_awaited_once_with(
            username=None,
            request_type="endless_exercises",
            input_data={"level": 2, "count": 5}
        )

    @pytest.mark.parametrize("params", [{"level": 0}, {"level": 6}, {"count": 0}, {"count": 51}])
    def test_invalid_parameters(self, mock_run_orchestrator, params):
        response = client.get("/api/v1/exercises/endless", params=params)
        assert response.status_code == 422


class TestEndlessResult:
    """Tests for POST /exercises/endless"""

    def test_record_result(self, mock_run_orchestrator):
        mock_run_orchestrator.return_value = {
            "has_error": False,
            "response": {
                "success": True,
                "character_completed": True,
                "level_advanced": False,
                "progression": dict(PROGRESSION, total_mastered=1, mastered_in_current_level=1, level_progress=10.0)
            }
        }

        response = client.post("/api/v1/exercises/endless", json={"character": "一", "accuracy": 91, "username": "learner"})

        assert response.status_code == 200
        data = response.json()
        assert data["character_completed"] is True
        assert data["progression"]["total_mastered"] == 1

    def test_invalid_accuracy(self, mock_run_orchestrator):
        response = client.post("/api/v1/exercises/endless", json={"character": "一", "accuracy": -5})
        assert response.status_code == 422

    def test_pipeline_error(self, mock_run_orchestrator):
        mock_run_orchestrator.return_value = {
            "has_error": True,
            "error_status": 400,
            "error_message": "Progression error: character and accuracy are required"
        }

        response = client.post("/api/v1/exercises/endless", json={"character": "一", "accuracy": 50})

        assert response.status_code == 400
