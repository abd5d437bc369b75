"""
Behavior-change stage classification.

Stages are picked fresh every turn from the wording of the latest message;
there is no transition table, so a user can move between any two stages
from one turn to the next.
"""

from __future__ import annotations

from typing import Optional

from .keywords import STAGE_KEYWORDS, contains_any
from .model import STAGE_ACTION, STAGE_CONTEMPLATION, ConversationAnalysis

# Joy-driven override needs a session longer than this
JOY_OVERRIDE_MIN_MESSAGES = 5


def match_stage_keywords(text: str) -> Optional[str]:
    """First stage (in stage order) whose keywords appear in text."""
    lowered = (text or "").lower()
    for stage, triggers in STAGE_KEYWORDS.items():
        if contains_any(lowered, triggers):
            return stage
    return None


def assess_behavior_stage(
    text: str,
    analysis: Optional[ConversationAnalysis] = None,
) -> str:
    """
    Classify the latest user message into a behavior-change stage.

    Order:
        1. keyword cascade on the latest text only
        2. with an analysis: latest emotion is joy and the session has
           more than 5 messages -> action
        3. contemplation
    """
    stage = match_stage_keywords(text)
    if stage is not None:
        return stage

    if analysis is not None:
        latest = analysis.latest_emotion
        if (
            latest is not None
            and latest.dominant == "joy"
            and analysis.message_count > JOY_OVERRIDE_MIN_MESSAGES
        ):
            return STAGE_ACTION

    return STAGE_CONTEMPLATION
