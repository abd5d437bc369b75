"""
Conversation history analysis.

Rebuilds a ConversationAnalysis from scratch for every turn: nothing is
cached between calls, so two calls over the same history always agree.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .emotion import analyze_emotion
from .extractor import extract
from .keywords import GROW_PHASE_KEYWORDS, contains_any
from .model import (
    FLOW_ACTION_PLANNING,
    FLOW_DEEPENING,
    FLOW_EXPLORATION,
    FLOW_INITIAL,
    RECENT_CONTEXT_SIZE,
    ConversationAnalysis,
    Message,
)


def conversation_flow(message_count: int) -> str:
    """Bucket a session by length: <=2, <=6, <=12, then action planning."""
    if message_count <= 2:
        return FLOW_INITIAL
    if message_count <= 6:
        return FLOW_EXPLORATION
    if message_count <= 12:
        return FLOW_DEEPENING
    return FLOW_ACTION_PLANNING


def detect_grow_phases(text: str) -> List[str]:
    """Every GROW phase whose keywords appear in text, in phase order."""
    return [
        phase for phase, triggers in GROW_PHASE_KEYWORDS.items()
        if contains_any(text, triggers)
    ]


def analyze_conversation(history: Optional[Sequence[Message]]) -> ConversationAnalysis:
    """
    Summarize a session's messages.

    Empty or missing history gives the initial analysis (zero counts,
    empty collections, flow "initial", no last user message).
    """
    if not history:
        return ConversationAnalysis()

    messages = list(history)
    user_texts = [m.content for m in messages if m.is_user]
    extraction = extract(user_texts)

    grow_history: List[str] = []
    for message in messages:
        if not message.is_user:
            continue
        grow_history.extend(detect_grow_phases(message.content))

    return ConversationAnalysis(
        message_count=len(messages),
        user_message_count=len(user_texts),
        topics=extraction.topics,
        user_goals=extraction.goals,
        challenges=extraction.challenges,
        emotions=[analyze_emotion(text) for text in user_texts],
        grow_phase_history=grow_history,
        last_user_message=user_texts[-1] if user_texts else None,
        conversation_flow=conversation_flow(len(messages)),
        recent_context=messages[-RECENT_CONTEXT_SIZE:],
    )
