"""
CC-Canto Dictionary Import
Builds the character and exercise reference data from a CC-Canto file.

Line format:
    traditional simplified [mandarin] {jyutping} /english/.../

Only single-character entries are used, and only the first entry of a
character counts. The output follows the frequency order of the learning
levels; characters missing from the dictionary get placeholder readings.
"""
import logging
import re
from typing import Iterable, Optional

from pydantic import BaseModel

from app.models.character import Character, StrokeTemplate
from app.models.exercise import Exercise, ExerciseType
from app.models.stroke import Point
from app.utils.progression import FREQUENCY_ORDERED_CHARACTERS, LEARNING_LEVELS
from app.utils.stroke_count import calculate_difficulty, get_stroke_count

logger = logging.getLogger(__name__)


ENTRY_PATTERN = re.compile(r"^(\S+)\s+(\S+)\s+\[([^\]]+)\]\s+\{([^}]+)\}\s+/([^/]+)/")


class DictionaryEntry(BaseModel):
    """One single-character CC-Canto entry"""
    traditional: str
    simplified: Optional[str] = None
    jyutping: str
    english: str


def _template(order: int, points: list[tuple[int, int]], stroke_type: str) -> StrokeTemplate:
    return StrokeTemplate(
        stroke_order=order,
        path=[Point(x=x, y=y) for x, y in points],
        stroke_type=stroke_type
    )


# Reference strokes on a 300x300 canvas
STROKE_TEMPLATES: dict[str, list[StrokeTemplate]] = {
    "一": [
        _template(1, [(50, 150), (250, 150)], "horizontal"),
    ],
    "二": [
        _template(1, [(50, 120), (250, 120)], "horizontal"),
        _template(2, [(50, 180), (250, 180)], "horizontal"),
    ],
    "三": [
        _template(1, [(50, 100), (250, 100)], "horizontal"),
        _template(2, [(50, 150), (250, 150)], "horizontal"),
        _template(3, [(50, 200), (250, 200)], "horizontal"),
    ],
    "人": [
        _template(1, [(100, 80), (150, 180)], "left-falling"),
        _template(2, [(200, 80), (150, 180)], "right-falling"),
    ],
    "口": [
        _template(1, [(100, 100), (100, 200)], "vertical"),
        _template(2, [(100, 200), (200, 200)], "horizontal"),
        _template(3, [(200, 200), (200, 100), (100, 100)], "turning"),
    ],
    "大": [
        _template(1, [(150, 80), (150, 200)], "vertical"),
        _template(2, [(80, 140), (220, 140)], "horizontal"),
        _template(3, [(100, 180), (200, 180)], "horizontal"),
    ],
}

# (characters, title, jyutping, english, difficulty)
PHRASES = [
    (["一", "二"], "Numbers: One-Two", "jat1 ji6", "one-two", 2),
    (["一", "三"], "Numbers: One-Three", "jat1 saam1", "one-three", 2),
    (["二", "三"], "Numbers: Two-Three", "ji6 saam1", "two-three", 2),
]


def parse_line(line: str) -> Optional[DictionaryEntry]:
    """Parse one dictionary line; None for comments, phrases and malformed lines."""
    if line.startswith("#") or not line.strip():
        return None

    match = ENTRY_PATTERN.match(line)
    if not match:
        return None

    traditional, simplified, _mandarin, jyutping, english = match.groups()
    if len(traditional) > 1:
        return None

    return DictionaryEntry(
        traditional=traditional,
        simplified=simplified if simplified != traditional else None,
        jyutping=jyutping.split()[0],
        english=" ".join(english.split())
    )


def parse_dictionary(lines: Iterable[str]) -> dict[str, DictionaryEntry]:
    """First single-character entry per traditional character."""
    entries: dict[str, DictionaryEntry] = {}
    for line in lines:
        entry = parse_line(line)
        if entry and entry.traditional not in entries:
            entries[entry.traditional] = entry
    return entries


def character_id(traditional: str) -> str:
    return f"char_{ord(traditional):x}"


def build_characters(entries: dict[str, DictionaryEntry]) -> list[Character]:
    """Frequency-ordered characters with stroke counts, difficulty and templates."""
    characters: list[Character] = []
    seen: set[str] = set()

    for rank, traditional in enumerate(FREQUENCY_ORDERED_CHARACTERS, start=1):
        if traditional in seen:
            continue
        seen.add(traditional)

        entry = entries.get(traditional)
        if entry is None:
            logger.warning(f"{traditional} not found in the dictionary, using placeholder readings")
            entry = DictionaryEntry(
                traditional=traditional,
                jyutping=traditional,
                english=f"Character: {traditional}"
            )

        stroke_count = get_stroke_count(traditional)
        characters.append(Character(
            id=character_id(traditional),
            traditional=traditional,
            simplified=entry.simplified,
            jyutping=entry.jyutping,
            english=entry.english,
            stroke_count=stroke_count,
            frequency=rank,
            difficulty=calculate_difficulty(stroke_count),
            strokes=STROKE_TEMPLATES.get(traditional, [])
        ))

    return characters


def build_exercises(characters: list[Character]) -> list[Exercise]:
    """
    One single-character exercise per character, at the level that first
    introduces it, plus the number phrases.
    """
    by_traditional = {character.traditional: character for character in characters}
    exercises: list[Exercise] = []
    introduced: set[str] = set()

    for level in LEARNING_LEVELS:
        new_characters = [
            by_traditional[char] for char in level.characters
            if char in by_traditional and char not in introduced
        ]
        introduced.update(character.traditional for character in new_characters)

        for character in sorted(new_characters, key=lambda c: (c.difficulty, c.stroke_count)):
            exercises.append(Exercise(
                id=f"ex_l{level.level}_{character.id}",
                type=ExerciseType.CHARACTER,
                title=f"L{level.level}: {character.traditional} ({character.english})",
                description=f"Level {level.level} - {level.name}: Practice writing {character.traditional}",
                difficulty=level.level,
                total_strokes=character.stroke_count,
                jyutping=character.jyutping,
                english=character.english,
                characters=[character]
            ))

    for chars, title, jyutping, english, difficulty in PHRASES:
        if not all(char in by_traditional for char in chars):
            continue
        phrase_characters = [by_traditional[char] for char in chars]
        exercises.append(Exercise(
            id=f"ex_phrase_{'_'.join(character.id for character in phrase_characters)}",
            type=ExerciseType.PHRASE,
            title=title,
            description=f"Practice writing {english.replace('-', ' and ')} in sequence",
            difficulty=difficulty,
            total_strokes=sum(character.stroke_count for character in phrase_characters),
            jyutping=jyutping,
            english=english,
            characters=phrase_characters
        ))

    return exercises
