"""
Tests for the CC-Canto dictionary import.
"""
from app.utils.cccanto import (
    build_characters,
    build_exercises,
    character_id,
    parse_dictionary,
    parse_line
)
from app.utils.progression import LEARNING_LEVELS


SAMPLE = [
    "# CC-Canto comment line",
    "",
    "一 一 [yi1] {jat1} /one/single/",
    "一 一 [yi1] {jat1 jat1} /second entry ignored/",
    "大 大 [da4] {daai6 taai3} /big;   large/",
    "個 个 [ge4] {go3} /classifier for people and objects/",
    "大人 大人 [da4 ren2] {daai6 jan4} /adult/",
    "not a dictionary line",
]


class TestParse:
    """Tests for line parsing."""

    def test_parse_line(self):
        entry = parse_line("大 大 [da4] {daai6 taai3} /big;   large/")

        assert entry.traditional == "大"
        assert entry.simplified is None
        assert entry.jyutping == "daai6"
        assert entry.english == "big; large"

    def test_simplified_kept_when_different(self):
        assert parse_line("個 个 [ge4] {go3} /classifier/").simplified == "个"

    def test_skips_phrases_comments_and_noise(self):
        assert parse_line("# comment") is None
        assert parse_line("   ") is None
        assert parse_line("大人 大人 [da4 ren2] {daai6 jan4} /adult/") is None
        assert parse_line("not a dictionary line") is None

    def test_first_entry_wins(self):
        entries = parse_dictionary(SAMPLE)

        assert set(entries) == {"一", "大", "個"}
        assert entries["一"].english == "one"


class TestBuild:
    """Tests for reference data construction."""

    def test_characters_follow_frequency_order(self):
        characters = build_characters(parse_dictionary(SAMPLE))

        assert characters[0].traditional == "一"
        assert characters[0].frequency == 1
        assert characters[0].english == "one"
        assert len({character.traditional for character in characters}) == len(characters)

    def test_missing_characters_get_placeholders(self):
        characters = build_characters({})
        you = next(character for character in characters if character.traditional == "我")

        assert you.english == "Character: 我"
        assert you.stroke_count == 7
        assert you.difficulty == 3

    def test_templates_attached(self):
        characters = {c.traditional: c for c in build_characters(parse_dictionary(SAMPLE))}

        assert len(characters["三"].strokes) == 3
        assert characters["大"].strokes[0].stroke_type == "vertical"
        assert characters["我"].strokes == []

    def test_exercises(self):
        characters = build_characters(parse_dictionary(SAMPLE))
        exercises = build_exercises(characters)

        singles = [exercise for exercise in exercises if exercise.type == "character"]
        phrases = [exercise for exercise in exercises if exercise.type == "phrase"]

        assert len(singles) == len(characters)
        assert len(phrases) == 3
        assert all(exercise.difficulty == 1 for exercise in singles[:len(LEARNING_LEVELS[0].characters)])
        assert phrases[0].characters[0].id == character_id("一")
        assert phrases[0].total_strokes == 3
