"""
Configuration settings for the Stroke Practice App.
All environment variables and app settings are centralized here.
"""
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Cantonese Stroke Practice"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # API Settings
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",  # Vite default
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173"
    ]

    # Azure Cosmos DB (defaults point at the local emulator)
    COSMOS_DB_ENDPOINT: str = "https://localhost:8081"
    COSMOS_DB_KEY: str = ""
    COSMOS_DB_DATABASE_NAME: str = "stroke_practice_db"
    # Container names
    COSMOS_DB_USERS_CONTAINER: str = "users"
    COSMOS_DB_CHARACTERS_CONTAINER: str = "characters"
    COSMOS_DB_EXERCISES_CONTAINER: str = "exercises"
    COSMOS_DB_SESSIONS_CONTAINER: str = "practice_sessions"
    COSMOS_DB_ATTEMPTS_CONTAINER: str = "practice_attempts"
    COSMOS_DB_USER_PROGRESS_CONTAINER: str = "user_progress"
    COSMOS_DB_PROGRESSION_CONTAINER: str = "progression"

    # SRS (Spaced Repetition System) Settings
    SRS_HISTORY_WINDOW: int = 10  # Most recent accuracies kept per character
    SRS_STREAK_THRESHOLD: float = 80  # Accuracy that keeps a streak alive
    SRS_BASE_DELAY_HOURS: float = 24
    SRS_MAX_INTERVAL_MULTIPLIER: int = 30  # Cap on 2^streak, in days
    SRS_OVERDUE_HIGH_PRIORITY_DAYS: int = 7

    # Learning progression
    PROGRESSION_MASTERY_THRESHOLD: float = 85  # Accuracy to mark a character mastered
    PROGRESSION_ADVANCEMENT_THRESHOLD: float = 80  # % of level mastered to advance
    PROGRESSION_PRACTICE_BATCH: int = 20
    PROGRESSION_REVIEW_BATCH: int = 10
    MASTERED_CHARACTER_LEVEL: int = 4  # Mastery level counted as "mastered" in stats

    # Accuracy scoring (placeholder heuristic)
    SCORING_STROKE_COUNT_PENALTY: float = 20
    SCORING_COUNT_WEIGHT: float = 0.6
    SCORING_QUALITY_WEIGHT: float = 0.4

    # Practice sessions
    AUTOSAVE_DEBOUNCE_SECONDS: float = 2.0
    RECENT_ATTEMPTS_LIMIT: int = 20

    # Client preferences (best effort, never required)
    PREFERENCES_FILE: Optional[str] = ".stroke_practice_prefs.json"

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Singleton instance
settings = get_settings()
