"""
Rule-based response composition.

Turns (GROW phase, behavior stage, conversation analysis) into a coaching
reply and up to three follow-up questions. Replies reuse what the user has
already said (a goal, a challenge, recent topics) when the history offers
it, and fall back to a stage-keyed canned sentence otherwise.
"""

from __future__ import annotations

from typing import List, Optional

from ..content.templates import (
    ADAPTIVE_BY_FLOW,
    ADAPTIVE_EMPATHETIC,
    ADAPTIVE_ENCOURAGING,
    GENERIC_QUESTIONS,
    GOAL_QUESTIONS,
    GOAL_WITH_GOAL,
    GOAL_WITH_TOPICS,
    OPENING_QUESTIONS,
    OPTIONS_WITH_CHALLENGE,
    OPTIONS_WITH_GOAL,
    REALITY_WITH_CHALLENGE,
    REALITY_WITH_GOAL,
    STAGE_RESPONSES,
    WELCOME_MESSAGE,
    WILL_WITH_GOAL,
)
from .extractor import goals_in_text
from .keywords import TOPIC_LABELS_JA
from .model import (
    GROW_PHASES,
    PHASE_GOAL,
    PHASE_OPTIONS,
    PHASE_REALITY,
    PHASE_WILL,
    STAGE_CONTEMPLATION,
    ConversationAnalysis,
    ResponsePayload,
)

WELCOME_CONFIDENCE = 0.8
CONTEXT_CONFIDENCE = 0.75
STAGE_CONFIDENCE = 0.6
ADAPTIVE_CONFIDENCE = 0.5

# Long challenge messages are quoted back shortened
MAX_QUOTE_CHARS = 40

NEGATIVE_EMOTIONS = ("sadness", "anger", "fear")


def _quote(text: str, limit: int = MAX_QUOTE_CHARS) -> str:
    text = text.strip()
    return text if len(text) <= limit else text[:limit] + "…"


class ResponseComposer:
    """
    Picks the reply text, questions, tone and confidence for one turn.

    Stateless: the same inputs always give the same payload.
    """

    def compose(
        self,
        grow_phase: str,
        behavior_stage: str,
        analysis: ConversationAnalysis,
        user_text: Optional[str] = None,
    ) -> ResponsePayload:
        if analysis.message_count == 0:
            return self.welcome(behavior_stage, grow_phase)

        if grow_phase not in GROW_PHASES:
            return ResponsePayload(
                ai_response=self.adaptive_response(analysis),
                next_questions=tuple(self.questions_for(PHASE_GOAL, analysis, user_text)),
                emotional_tone=self.emotional_tone(grow_phase, analysis),
                confidence=ADAPTIVE_CONFIDENCE,
                behavior_stage=behavior_stage,
                grow_phase=grow_phase,
            )

        text = self.phase_response(grow_phase, behavior_stage, analysis, user_text)
        used_context = text is not None
        if text is None:
            text = self.stage_response(grow_phase, behavior_stage)

        return ResponsePayload(
            ai_response=text,
            next_questions=tuple(self.questions_for(grow_phase, analysis, user_text)),
            emotional_tone=self.emotional_tone(grow_phase, analysis),
            confidence=CONTEXT_CONFIDENCE if used_context else STAGE_CONFIDENCE,
            behavior_stage=behavior_stage,
            grow_phase=grow_phase,
        )

    def welcome(self, behavior_stage: str, grow_phase: str = PHASE_GOAL) -> ResponsePayload:
        return ResponsePayload(
            ai_response=WELCOME_MESSAGE,
            next_questions=tuple(OPENING_QUESTIONS),
            emotional_tone="supportive",
            confidence=WELCOME_CONFIDENCE,
            behavior_stage=behavior_stage,
            grow_phase=grow_phase,
        )

    # ── Reply text ──────────────────────────────────────────────────────────

    def phase_response(
        self,
        grow_phase: str,
        behavior_stage: str,
        analysis: ConversationAnalysis,
        user_text: Optional[str] = None,
    ) -> Optional[str]:
        """Context-aware sentence for the phase, or None when nothing to reuse."""
        goal = self._known_goal(analysis, user_text)
        challenge = _quote(analysis.challenges[-1]) if analysis.challenges else None

        if grow_phase == PHASE_GOAL:
            if goal:
                return GOAL_WITH_GOAL.format(goal=goal)
            if analysis.topics:
                return GOAL_WITH_TOPICS.format(topics=self._topic_phrase(analysis.topics))
        elif grow_phase == PHASE_REALITY:
            if challenge:
                return REALITY_WITH_CHALLENGE.format(challenge=challenge)
            if goal:
                return REALITY_WITH_GOAL.format(goal=goal)
        elif grow_phase == PHASE_OPTIONS:
            if goal:
                return OPTIONS_WITH_GOAL.format(goal=goal)
            if challenge:
                return OPTIONS_WITH_CHALLENGE.format(challenge=challenge)
        elif grow_phase == PHASE_WILL:
            if goal:
                return WILL_WITH_GOAL.format(goal=goal)
        return None

    def stage_response(self, grow_phase: str, behavior_stage: str) -> str:
        by_stage = STAGE_RESPONSES[grow_phase]
        return by_stage.get(behavior_stage, by_stage[STAGE_CONTEMPLATION])

    def adaptive_response(self, analysis: ConversationAnalysis) -> str:
        latest = analysis.latest_emotion
        if latest is not None and latest.dominant == "sadness":
            return ADAPTIVE_EMPATHETIC
        if latest is not None and latest.dominant == "joy":
            return ADAPTIVE_ENCOURAGING
        return ADAPTIVE_BY_FLOW.get(analysis.conversation_flow, ADAPTIVE_BY_FLOW["initial"])

    # ── Questions / tone ────────────────────────────────────────────────────

    def questions_for(
        self,
        grow_phase: str,
        analysis: ConversationAnalysis,
        user_text: Optional[str] = None,
    ) -> List[str]:
        phase = grow_phase if grow_phase in GROW_PHASES else PHASE_GOAL
        goal = self._known_goal(analysis, user_text)
        if goal:
            return [q.format(goal=goal) for q in GOAL_QUESTIONS[phase]][:3]
        return list(GENERIC_QUESTIONS[phase])[:3]

    def emotional_tone(self, grow_phase: str, analysis: ConversationAnalysis) -> str:
        latest = analysis.latest_emotion
        if latest is not None and latest.dominant in NEGATIVE_EMOTIONS:
            return "empathetic"
        if latest is not None and latest.dominant == "joy":
            return "encouraging"
        if grow_phase == PHASE_WILL:
            return "motivational"
        return "supportive"

    # ── Helpers ─────────────────────────────────────────────────────────────

    def _known_goal(
        self, analysis: ConversationAnalysis, user_text: Optional[str]
    ) -> Optional[str]:
        if analysis.user_goals:
            return analysis.user_goals[0]
        if user_text:
            goals = goals_in_text(user_text)
            if goals:
                return goals[0]
        return None

    def _topic_phrase(self, topics: List[str]) -> str:
        return "・".join(TOPIC_LABELS_JA.get(t, t) for t in topics[:2])
