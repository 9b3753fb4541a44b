"""
Learning Progression
Chooses which characters a learner practises next in endless mode.

Characters are introduced in frequency order across five cumulative levels.
Inside a level the selection is balanced across difficulty buckets, easiest
first. Frequency is the primary key; a bounded random jitter may swap
characters that sit close together in the frequency list, so sessions do
not repeat exactly.
"""
import random
from typing import Optional

from pydantic import BaseModel

from app.config import settings
from app.models.progress import ProgressionState, ProgressionStats
from app.utils.stroke_count import calculate_difficulty, get_stroke_count


# Ordered by usage frequency in Cantonese conversation and media.
# Later levels repeat a few characters; only the first occurrence ranks.
FREQUENCY_ORDERED_CHARACTERS = [
    # Level 1
    "一", "二", "三", "我", "你", "係", "有", "個", "嘅", "喺",

    # Level 2
    "四", "五", "六", "七", "八", "九", "十", "人", "大", "小",
    "好", "唔", "去", "嚟", "食", "飲", "屋", "企", "家", "佢",
    "咁", "都", "會", "得", "要", "做", "睇", "聽", "講", "時",
    "日", "月", "年", "今", "明", "早", "夜", "上", "下", "中",

    # Level 3
    "前", "後", "左", "右", "裏", "度", "邊", "咩", "點", "幾",
    "百", "千", "萬", "零", "先", "再", "已", "經", "仲", "同",
    "或", "但", "因", "為", "所", "以", "如", "果", "雖", "然",
    "而", "且", "只", "都", "又", "也", "就", "已", "還", "更",
    "最", "很", "太", "非", "常", "真", "假", "新", "舊", "快",

    # Level 4
    "慢", "高", "矮", "長", "短", "遠", "近", "多", "少", "開",
    "心", "手", "腳", "頭", "面", "眼", "口", "耳", "鼻", "髮",
    "身", "體", "肚", "背", "肩", "指", "牙", "舌", "頸", "腰",
    "紅", "藍", "綠", "黃", "黑", "白", "灰", "橙", "紫", "棕",
    "天", "氣", "雨", "雪", "風", "熱", "冷", "暖", "涼", "乾",
    "濕", "晴", "陰", "雲", "電", "雷", "霧", "水", "火", "土",
    "金", "木", "石", "草", "花", "樹", "葉", "果", "菜", "米",
    "飯", "麵", "粥", "湯", "肉", "魚", "蛋", "奶", "茶", "咖",
    "啡", "糖", "鹽", "油", "醋", "辣", "甜", "酸", "苦", "淡",
    "車", "船", "飛", "機", "巴", "士", "火", "電", "單", "的",

    # Level 5
    "街", "路", "橋", "站", "場", "店", "市", "鋪", "廠", "園",
    "學", "校", "生", "老", "師", "同", "學", "朋", "友", "鄰",
    "居", "客", "人", "主", "人", "老", "闆", "員", "工", "醫",
    "生", "護", "士", "司", "機", "廚", "師", "服", "務", "員",
    "警", "察", "消", "防", "員", "郵", "差", "清", "潔", "工",
    "書", "報", "紙", "雜", "誌", "新", "聞", "電", "視", "收",
    "音", "機", "電", "話", "手", "機", "電", "腦", "網", "路",
    "遊", "戲", "電", "影", "音", "樂", "歌", "舞", "蹈", "畫",
    "畫", "照", "片", "相", "機", "錄", "影", "帶", "光", "碟",
    "銀", "行", "錢", "幣", "卡", "信", "用", "卡", "現", "金",
]

FREQUENCY_WEIGHT = 0.8
RANDOM_WEIGHT = 0.2


def _unique(characters: list[str]) -> list[str]:
    return list(dict.fromkeys(characters))


class LearningLevel(BaseModel):
    """A cumulative slice of the frequency list"""
    level: int
    name: str
    description: str
    character_count: int
    max_difficulty: int
    characters: list[str]


def _level(level: int, name: str, description: str, count: int, max_difficulty: int) -> LearningLevel:
    return LearningLevel(
        level=level,
        name=name,
        description=description,
        character_count=count,
        max_difficulty=max_difficulty,
        characters=_unique(FREQUENCY_ORDERED_CHARACTERS[:count])
    )


LEARNING_LEVELS = [
    _level(1, "Foundation", "Essential characters for basic communication", 10, 2),
    _level(2, "Core Vocabulary", "Daily conversation fundamentals", 50, 3),
    _level(3, "Practical Communication", "Real-world usage and practical expressions", 100, 4),
    _level(4, "Advanced Daily Life", "Complex daily situations and detailed descriptions", 200, 4),
    _level(5, "Cultural Fluency", "Cultural context and sophisticated expression", 300, 5),
]

MAX_LEVEL = len(LEARNING_LEVELS)


class LearningProgression:
    """
    Character selector for one learner.

    Wraps a ProgressionState that the caller loads and persists; every
    mutating method changes ``self.state`` in place.
    """

    def __init__(
        self,
        state: Optional[ProgressionState] = None,
        rng: Optional[random.Random] = None
    ):
        self.state = state or ProgressionState(
            mastery_threshold=settings.PROGRESSION_MASTERY_THRESHOLD,
            advancement_threshold=settings.PROGRESSION_ADVANCEMENT_THRESHOLD
        )
        self.rng = rng or random.Random()

    def get_current_level(self) -> LearningLevel:
        """Current level, falling back to the first one"""
        if 1 <= self.state.current_level <= MAX_LEVEL:
            return LEARNING_LEVELS[self.state.current_level - 1]
        return LEARNING_LEVELS[0]

    def next_characters_for_practice(self, count: int = 10) -> list[str]:
        """
        Pick up to ``count`` unmastered characters from the current level.

        Characters are bucketed by stroke-count difficulty. Each bucket is
        ordered by ``rank / level_size * 0.8 + random * 0.2`` and the buckets
        are visited round-robin, easiest first. A character can only overtake
        one ranked less than a quarter of the level ahead of it.

        When the level has nothing left, advances if allowed (and selects from
        the new level) or falls back to a review batch of the whole level.
        """
        if count <= 0:
            return []

        level = self.get_current_level()
        available = [
            char for char in level.characters
            if char not in self.state.completed_characters
        ]

        if not available:
            return self._handle_level_completion(count)

        level_size = len(level.characters)
        buckets: dict[int, list[tuple[float, str]]] = {}
        for rank, char in enumerate(level.characters):
            if char in self.state.completed_characters:
                continue
            difficulty = calculate_difficulty(get_stroke_count(char))
            key = rank / level_size * FREQUENCY_WEIGHT + self.rng.random() * RANDOM_WEIGHT
            buckets.setdefault(difficulty, []).append((key, char))

        ordered = [
            [char for _, char in sorted(buckets[difficulty])]
            for difficulty in sorted(buckets)
        ]

        selected: list[str] = []
        position = 0
        while len(selected) < count and any(position < len(bucket) for bucket in ordered):
            for bucket in ordered:
                if position < len(bucket):
                    selected.append(bucket[position])
                    if len(selected) == count:
                        break
            position += 1

        return selected

    def mark_completed(self, character: str, accuracy: float) -> bool:
        """Record a mastered character; returns whether it was added."""
        if accuracy >= self.state.mastery_threshold:
            self.state.completed_characters.add(character)
            return True
        return False

    def mastered_in_level(self, level: Optional[LearningLevel] = None) -> int:
        level = level or self.get_current_level()
        return sum(1 for char in level.characters if char in self.state.completed_characters)

    def can_advance_level(self) -> bool:
        """True when enough of the current level is mastered."""
        level = self.get_current_level()
        percentage = self.mastered_in_level(level) / len(level.characters) * 100
        return percentage >= self.state.advancement_threshold

    def advance_level(self) -> bool:
        """Move to the next level when allowed; returns whether it moved."""
        if self.can_advance_level() and self.state.current_level < MAX_LEVEL:
            self.state.current_level += 1
            return True
        return False

    def generate_endless_exercises(
        self,
        practice_count: Optional[int] = None,
        review_count: Optional[int] = None
    ) -> list[str]:
        """Practice batch followed by a review batch of mastered characters."""
        if practice_count is None:
            practice_count = settings.PROGRESSION_PRACTICE_BATCH
        if review_count is None:
            review_count = settings.PROGRESSION_REVIEW_BATCH

        practice = self._shuffled(self.next_characters_for_practice(practice_count))
        review = self._review_characters(review_count)
        return practice + review

    def get_progression_stats(self) -> ProgressionStats:
        level = self.get_current_level()
        mastered = self.mastered_in_level(level)

        return ProgressionStats(
            current_level=self.state.current_level,
            level_name=level.name,
            total_mastered=len(self.state.completed_characters),
            mastered_in_current_level=mastered,
            total_in_current_level=len(level.characters),
            level_progress=mastered / len(level.characters) * 100,
            can_advance=self.can_advance_level()
        )

    def _handle_level_completion(self, count: int) -> list[str]:
        if self.advance_level():
            return self.next_characters_for_practice(count)

        # Reinforcement mode: the whole level, shuffled
        level = self.get_current_level()
        return self._shuffled(level.characters)[:min(count, settings.PROGRESSION_REVIEW_BATCH)]

    def _review_characters(self, count: int) -> list[str]:
        return self._shuffled(sorted(self.state.completed_characters))[:count]

    def _shuffled(self, characters: list[str]) -> list[str]:
        shuffled = list(characters)
        self.rng.shuffle(shuffled)
        return shuffled
