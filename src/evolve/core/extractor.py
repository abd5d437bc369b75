"""
Topic, goal and challenge extraction from a session's user messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .keywords import (
    CHALLENGE_KEYWORDS,
    GOAL_PATTERNS,
    GOAL_TRAILING_COPULAS,
    MAX_CHALLENGES,
    MAX_USER_GOALS,
    TOPIC_KEYWORDS,
    contains_any,
)


@dataclass
class Extraction:
    topics: List[str] = field(default_factory=list)
    goals: List[str] = field(default_factory=list)
    challenges: List[str] = field(default_factory=list)


def extract_topics(texts: Sequence[str]) -> List[str]:
    """Topic labels mentioned anywhere, each once, in keyword-table order."""
    return [
        topic for topic, triggers in TOPIC_KEYWORDS.items()
        if any(contains_any(text, triggers) for text in texts)
    ]


def _clean_goal(raw: str) -> str:
    goal = raw.strip()
    for copula in GOAL_TRAILING_COPULAS:
        if goal.endswith(copula) and len(goal) > len(copula):
            goal = goal[: -len(copula)].rstrip()
    return goal


def goals_in_text(text: str) -> List[str]:
    """
    Goal phrases found in one message, in order of appearance.

    Patterns run in priority order; a lower-priority pattern never captures
    text that already sits inside a higher-priority match.
    """
    taken: List[Tuple[int, int]] = []
    found: List[Tuple[int, str]] = []
    for pattern in GOAL_PATTERNS:
        for match in pattern.finditer(text):
            start, end = match.span()
            if any(start < t_end and t_start < end for t_start, t_end in taken):
                continue
            goal = _clean_goal(match.group(1))
            if not goal:
                continue
            taken.append((start, end))
            found.append((start, goal))
    return [goal for _, goal in sorted(found, key=lambda item: item[0])]


def extract_goals(texts: Sequence[str], limit: int = MAX_USER_GOALS) -> List[str]:
    """Every goal phrase in message order, first `limit` kept."""
    goals: List[str] = []
    for text in texts:
        goals.extend(goals_in_text(text))
    return goals[:limit]


def extract_challenges(texts: Sequence[str], limit: int = MAX_CHALLENGES) -> List[str]:
    """Whole messages that mention a difficulty, first `limit` kept."""
    return [text for text in texts if contains_any(text, CHALLENGE_KEYWORDS)][:limit]


def extract(texts: Sequence[str]) -> Extraction:
    return Extraction(
        topics=extract_topics(texts),
        goals=extract_goals(texts),
        challenges=extract_challenges(texts),
    )
