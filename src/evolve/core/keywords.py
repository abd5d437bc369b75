"""
Keyword table for EVOLVE Coach.

Every trigger list used by the emotion scorer, the history extractor and the
stage / GROW classifiers lives here, so the classifiers and the extractor
always agree on what a word means. Mapping order is decision order.
"""

from __future__ import annotations

import re
from typing import Dict, List, Pattern

# =============================================================================
# EMOTIONS
# =============================================================================

EMOTION_LABELS = ("joy", "sadness", "anger", "fear", "surprise", "disgust", "neutral")

# surprise / disgust have no lexicon and stay at 0 unless extended
EMOTION_KEYWORDS: Dict[str, List[str]] = {
    "joy": ["嬉しい", "楽しい", "幸せ", "良い", "素晴らしい"],
    "sadness": ["悲しい", "辛い", "落ち込む", "憂鬱"],
    "anger": ["怒り", "イライラ", "腹立つ", "ムカつく"],
    "fear": ["不安", "心配", "怖い", "恐れ"],
}

EMOTION_INCREMENT = 0.3
NEUTRAL_BASELINE = 0.5

# =============================================================================
# TOPICS / CHALLENGES / GOALS
# =============================================================================

TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "career": ["仕事", "キャリア", "転職", "職場", "昇進", "働き方"],
    "health": ["健康", "運動", "ダイエット", "睡眠", "食事", "体重"],
    "relationships": ["人間関係", "家族", "友人", "友達", "恋人", "パートナー"],
    "learning": ["学習", "勉強", "資格", "スキル", "読書", "英語"],
    "lifestyle": ["生活", "習慣", "趣味", "時間管理", "お金", "朝活"],
}

TOPIC_LABELS_JA: Dict[str, str] = {
    "career": "仕事・キャリア",
    "health": "健康",
    "relationships": "人間関係",
    "learning": "学び",
    "lifestyle": "生活習慣",
}

CHALLENGE_KEYWORDS: List[str] = [
    "困っている", "悩んでいる", "問題", "課題", "うまくいかない", "難しい",
]

_STOP = r"。！？!?\n"

# Verb stems that take the desire suffix たい (読み-, 食べ-, 見-). Adjectives
# ending in たい (冷たい, 重たい, ありがたい, めでたい) have a kanji, が or で
# in this position and stay out.
_DESIRE_STEM = r"[いきぎしじちにひびみりえけげせぜてねべめれ見寝来出]"

# Priority order: explicit goal statements before generic desire phrasing.
GOAL_PATTERNS: List[Pattern[str]] = [
    re.compile(rf"目標は([^{_STOP}]+)"),
    re.compile(rf"達成したいのは([^{_STOP}]+)"),
    re.compile(rf"([^{_STOP}、]*?(?:になりたい|したい|{_DESIRE_STEM}たい))"),
]

GOAL_TRAILING_COPULAS = ("です", "だ")

MAX_USER_GOALS = 5
MAX_CHALLENGES = 3

# =============================================================================
# GROW PHASES / BEHAVIOR STAGES
# =============================================================================

GROW_PHASE_KEYWORDS: Dict[str, List[str]] = {
    "Goal": ["目標", "ゴール", "達成したい"],
    "Reality": ["現状", "今", "実際"],
    "Options": ["方法", "どうすれば", "やり方"],
    "Will": ["やります", "実行", "始める"],
}

STAGE_KEYWORDS: Dict[str, List[str]] = {
    "precontemplation": ["変わりたくない", "必要ない"],
    "contemplation": ["考えている", "悩んでいる"],
    "preparation": ["準備", "計画"],
    "action": ["始めた", "実行中"],
    "maintenance": ["続けている", "習慣"],
}


def contains_any(text: str, triggers: List[str]) -> bool:
    """True when any trigger occurs as a substring of text."""
    return any(t in text for t in triggers)
