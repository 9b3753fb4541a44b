"""
Stroke Count Lookup
Traditional-form stroke counts for common Cantonese characters and the
difficulty scale derived from them.
"""
from typing import Sequence


# Used when a character is missing from the table
DEFAULT_STROKE_COUNT = 8

NOT_RANKED = 9999

STROKE_COUNTS: dict[str, int] = {
    # Numbers
    "一": 1, "二": 2, "三": 3, "四": 5, "五": 4, "六": 4, "七": 2, "八": 2, "九": 2, "十": 2,
    "百": 6, "千": 3, "萬": 13, "億": 15, "零": 13, "半": 5, "雙": 18, "打": 5, "個": 10,

    # Most frequent characters
    "的": 8, "了": 2, "在": 6, "是": 9, "我": 7, "有": 6, "和": 8, "就": 12, "不": 4, "人": 2,
    "都": 11, "來": 8, "他": 5, "時": 10, "會": 13, "地": 6, "得": 11, "對": 14,
    "出": 5, "年": 6, "要": 9, "下": 3, "過": 12, "主": 5, "從": 11, "多": 6,

    # Cantonese
    "佢": 7, "咁": 9, "嘅": 14, "係": 9, "喺": 12, "啲": 11, "嗰": 13, "呢": 8, "咗": 9,
    "嘞": 14, "咩": 9, "乜": 4, "點": 17, "邊": 18, "幾": 12, "咪": 9, "啦": 11, "嚟": 17,
    "去": 5, "返": 11, "食": 9, "飲": 12, "睇": 13, "聽": 22, "講": 17, "做": 11,

    # Family and people
    "男": 7, "女": 3, "子": 3, "父": 4, "母": 5, "兄": 5, "弟": 7, "姐": 8, "妹": 8,
    "爸": 8, "媽": 13, "哥": 10, "公": 4, "婆": 11, "爺": 13, "嫲": 13,

    # Adjectives
    "大": 3, "小": 3, "好": 6, "壞": 16, "新": 13, "舊": 18, "快": 7, "慢": 14, "高": 10, "矮": 13,
    "長": 8, "短": 12, "遠": 13, "近": 7, "少": 4, "早": 6, "遲": 15, "前": 9, "後": 9,

    # Colours
    "紅": 9, "橙": 16, "黃": 12, "綠": 14, "藍": 18, "紫": 12, "黑": 12, "白": 5, "灰": 6, "棕": 12,

    # Body
    "頭": 16, "面": 9, "眼": 11, "耳": 6, "鼻": 14, "口": 3, "牙": 4, "舌": 6, "手": 4, "指": 9,
    "腳": 13, "腿": 13, "心": 4, "肚": 7, "背": 9, "肩": 8, "頸": 14, "腰": 13,

    # Time
    "日": 4, "月": 4, "分": 4, "秒": 9, "今": 4, "昨": 9, "明": 8,
    "午": 4, "晚": 11, "夜": 8, "春": 9, "夏": 10, "秋": 9, "冬": 5, "星": 9, "期": 12,

    # Places
    "家": 10, "屋": 9, "房": 8, "門": 8, "窗": 12, "床": 7, "桌": 10, "椅": 12, "廁": 7, "廚": 12,
    "街": 12, "路": 13, "車": 7, "站": 10, "店": 8, "場": 12, "園": 13, "校": 10, "院": 14, "所": 8,

    # Food and drink
    "飯": 12, "麵": 20, "粥": 12, "湯": 13, "菜": 11, "肉": 6, "魚": 11, "蛋": 11, "奶": 5, "茶": 9,
    "咖": 8, "啡": 11, "水": 4, "酒": 10, "糖": 16, "鹽": 24, "油": 8, "醋": 15, "醬": 17, "辣": 14,

    # Weather
    "天": 4, "氣": 10, "雲": 12, "雨": 8, "雪": 11, "風": 9, "雷": 13, "電": 13, "熱": 15, "暖": 13,
    "涼": 11, "冷": 7, "凍": 10, "乾": 11, "濕": 17, "晴": 12, "陰": 11, "霧": 19,

    # Transport
    "巴": 4, "士": 3, "船": 11, "飛": 9, "機": 16, "火": 4, "單": 12,

    # Function words
    "緊": 14, "住": 7, "仲": 6, "已": 3, "經": 13, "先": 6, "再": 6, "又": 2, "同": 6,
    "或": 8, "者": 8, "但": 7, "如": 6, "果": 8, "因": 6, "為": 9, "以": 4, "雖": 17,
    "然": 12, "而": 6, "且": 5, "除": 10, "非": 8, "只": 5,

    # Verbs
    "行": 6, "走": 7, "跑": 12, "跳": 13, "企": 6, "坐": 7, "瞓": 16, "起": 10, "落": 12, "上": 3,
    "入": 2, "開": 12, "關": 19, "着": 11, "穿": 9, "洗": 9, "刷": 8, "擦": 17,
    "掃": 11, "拖": 8, "抹": 8, "煮": 12, "炒": 8, "蒸": 13, "煎": 13, "炸": 9, "烤": 10, "燒": 16,

    # Feelings
    "興": 16, "樂": 15, "喜": 12, "歡": 22, "愛": 13, "恨": 9,
    "怕": 8, "驚": 22, "怒": 9, "傷": 13, "擔": 16, "放": 8,

    # Directions
    "東": 8, "南": 9, "西": 6, "北": 5, "左": 5, "右": 5,
    "中": 4, "內": 4, "外": 5, "裏": 12, "旁": 10, "隔": 12, "離": 19,

    # Media and technology
    "話": 13, "腦": 13, "網": 14, "器": 16, "視": 11, "音": 9,
    "片": 4, "戲": 17, "遊": 12, "書": 10, "報": 12, "紙": 10, "筆": 12, "字": 6, "畫": 12,
}


def get_stroke_count(character: str) -> int:
    """Stroke count from the table, DEFAULT_STROKE_COUNT when unknown."""
    return STROKE_COUNTS.get(character, DEFAULT_STROKE_COUNT)


def calculate_difficulty(stroke_count: int) -> int:
    """
    Map a stroke count to the 1-5 difficulty scale.

    <=3 -> 1, <=6 -> 2, <=10 -> 3, <=15 -> 4, otherwise 5.
    """
    if stroke_count <= 3:
        return 1
    if stroke_count <= 6:
        return 2
    if stroke_count <= 10:
        return 3
    if stroke_count <= 15:
        return 4
    return 5


def get_frequency_rank(character: str, characters: Sequence[str]) -> int:
    """1-based position in a frequency-ordered list (lower is more frequent)."""
    try:
        return list(characters).index(character) + 1
    except ValueError:
        return NOT_RANKED
