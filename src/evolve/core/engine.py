"""
CoachingEngine: one coaching turn, end to end.

    history -> ConversationAnalysis -> behavior stage + GROW phase
            -> ResponseComposer -> ResponsePayload

When an AI service is injected it answers the turn instead; if it fails,
the failure is logged and the rule-based pipeline answers.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..llm.service import AIServiceError, CoachAIService, CoachingContext
from .analyzer import analyze_conversation
from .composer import ResponseComposer
from .emotion import EmotionResult, analyze_emotion
from .grow import determine_grow_phase
from .model import SOURCE_AI, ConversationAnalysis, Message, ResponsePayload
from .stages import assess_behavior_stage

logger = logging.getLogger(__name__)


class CoachingEngine:
    """
    Turn-level coaching pipeline.

    Holds no per-session state: every call derives its analysis from the
    history it is given, so turns for different sessions are independent.
    """

    def __init__(
        self,
        ai_service: Optional[CoachAIService] = None,
        composer: Optional[ResponseComposer] = None,
    ):
        self.ai_service = ai_service
        self.composer = composer or ResponseComposer()

    @property
    def uses_ai(self) -> bool:
        return self.ai_service is not None

    def analyze(self, text: str) -> EmotionResult:
        return analyze_emotion(text)

    def respond(
        self,
        user_text: str,
        history: Optional[Sequence[Message]] = None,
        goals: Optional[List[Dict[str, Any]]] = None,
    ) -> ResponsePayload:
        """
        Produce the reply for one user turn.

        Args:
            user_text: The latest user message ("" on a bare session start)
            history: The session's messages so far, latest user message
                included; None or empty on the first turn
            goals: The user's stored goals, forwarded to the AI service

        Returns:
            A fully populated ResponsePayload
        """
        analysis = analyze_conversation(history)

        if self.ai_service is not None:
            try:
                return self._respond_with_ai(user_text, history, goals, analysis)
            except AIServiceError as e:
                logger.warning(f"[CoachingEngine] AI service failed, using rule-based reply: {e}")

        return self.respond_with_rules(user_text, analysis)

    def respond_with_rules(
        self, user_text: str, analysis: ConversationAnalysis
    ) -> ResponsePayload:
        stage = assess_behavior_stage(user_text, analysis)
        phase = determine_grow_phase(user_text, analysis)
        return self.composer.compose(phase, stage, analysis, user_text)

    def _respond_with_ai(
        self,
        user_text: str,
        history: Optional[Sequence[Message]],
        goals: Optional[List[Dict[str, Any]]],
        analysis: ConversationAnalysis,
    ) -> ResponsePayload:
        context = CoachingContext(
            session_history=list(history or []),
            user_goals=list(goals or []),
        )
        stage = self.ai_service.classify_behavior_stage(user_text, context)
        context.behavior_stage = stage
        reply = self.ai_service.generate_response(user_text, context)

        return ResponsePayload(
            ai_response=reply.content,
            next_questions=tuple(reply.next_questions),
            emotional_tone=reply.emotional_tone,
            confidence=reply.confidence,
            behavior_stage=stage,
            grow_phase=determine_grow_phase(user_text, analysis),
            source=SOURCE_AI,
        )
