"""
GROW-phase selection (Goal / Reality / Options / Will).
"""

from __future__ import annotations

from typing import Optional

from .keywords import GROW_PHASE_KEYWORDS, contains_any
from .model import NEXT_PHASE, PHASE_GOAL, ConversationAnalysis


def determine_grow_phase(
    text: str,
    analysis: Optional[ConversationAnalysis] = None,
) -> str:
    """
    Pick the GROW phase for this turn.

    Keywords in the latest text win, checked in phase order. Without a
    keyword match the conversation moves one step around the cycle
    Goal -> Reality -> Options -> Will -> Goal from the last recorded phase,
    and starts at Goal when nothing has been recorded yet.
    """
    for phase, triggers in GROW_PHASE_KEYWORDS.items():
        if contains_any(text or "", triggers):
            return phase

    if analysis is not None and analysis.grow_phase_history:
        last = analysis.grow_phase_history[-1]
        return NEXT_PHASE.get(last, PHASE_GOAL)

    return PHASE_GOAL
