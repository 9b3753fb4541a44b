"""
Database Seed Script
====================
Loads characters and exercises from a CC-Canto dictionary file into Cosmos DB
and creates the guest user.

Run with: python scripts/seed_database.py path/to/cccanto-webdist.txt

Documents are upserted with fixed ids, so the script can be re-run safely.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add the backend directory to the path
BASE_DIR = Path(__file__).parent.parent
BACKEND_DIR = BASE_DIR / "backend"
sys.path.insert(0, str(BACKEND_DIR))

from app.config import settings  # noqa: E402
from app.services.cosmos_db_service import cosmos_db_service  # noqa: E402
from app.utils.cccanto import build_characters, build_exercises, parse_dictionary  # noqa: E402

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger("seed_database")

DEFAULT_DICTIONARY = BASE_DIR / "db" / "cccanto-webdist.txt"


async def seed(dictionary_path: Path) -> dict:
    """Seed the database and return the number of documents written per kind."""
    logger.info(f"Reading CC-Canto file: {dictionary_path}")
    with dictionary_path.open(encoding="utf-8") as dictionary:
        entries = parse_dictionary(dictionary)
    logger.info(f"Extracted {len(entries)} single characters")

    characters = build_characters(entries)
    exercises = build_exercises(characters)

    await cosmos_db_service.initialize()

    await cosmos_db_service.find_or_create_user("guest", name="Guest User", is_guest=True)

    for character in characters:
        await cosmos_db_service.upsert_character(character.to_dict())
    logger.info(f"Upserted {len(characters)} characters")

    for exercise in exercises:
        await cosmos_db_service.upsert_exercise(exercise.to_dict())
    logger.info(f"Upserted {len(exercises)} exercises")

    return {
        "characters": len(characters),
        "stroke_templates": sum(len(character.strokes) for character in characters),
        "exercises": len(exercises),
        "users": 1
    }


def main():
    parser = argparse.ArgumentParser(description="Seed the stroke practice database")
    parser.add_argument(
        "dictionary",
        nargs="?",
        type=Path,
        default=DEFAULT_DICTIONARY,
        help="CC-Canto dictionary file"
    )
    args = parser.parse_args()

    if not args.dictionary.exists():
        logger.error(f"Dictionary file not found: {args.dictionary}")
        sys.exit(1)

    try:
        summary = asyncio.run(seed(args.dictionary))
    except Exception as e:
        logger.error(f"Error seeding database: {e}")
        sys.exit(1)

    logger.info(f"Database seeded: {summary}")


if __name__ == "__main__":
    main()
