"""
Conversation data model for EVOLVE Coach.

Messages are immutable once recorded. Everything else here is derived
per turn from a session's message list and never stored as authoritative
state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .emotion import EmotionResult

# ── Speakers ────────────────────────────────────────────────────────────────
SPEAKER_USER = "user"
SPEAKER_AI = "ai"

# ── Behavior-change stages (Transtheoretical Model) ─────────────────────────
STAGE_PRECONTEMPLATION = "precontemplation"
STAGE_CONTEMPLATION = "contemplation"
STAGE_PREPARATION = "preparation"
STAGE_ACTION = "action"
STAGE_MAINTENANCE = "maintenance"

BEHAVIOR_STAGES: Tuple[str, ...] = (
    STAGE_PRECONTEMPLATION,
    STAGE_CONTEMPLATION,
    STAGE_PREPARATION,
    STAGE_ACTION,
    STAGE_MAINTENANCE,
)

# ── GROW phases ─────────────────────────────────────────────────────────────
PHASE_GOAL = "Goal"
PHASE_REALITY = "Reality"
PHASE_OPTIONS = "Options"
PHASE_WILL = "Will"

GROW_PHASES: Tuple[str, ...] = (PHASE_GOAL, PHASE_REALITY, PHASE_OPTIONS, PHASE_WILL)

NEXT_PHASE: Dict[str, str] = {
    PHASE_GOAL: PHASE_REALITY,
    PHASE_REALITY: PHASE_OPTIONS,
    PHASE_OPTIONS: PHASE_WILL,
    PHASE_WILL: PHASE_GOAL,
}

# ── Conversation flow buckets ───────────────────────────────────────────────
FLOW_INITIAL = "initial"
FLOW_EXPLORATION = "exploration"
FLOW_DEEPENING = "deepening"
FLOW_ACTION_PLANNING = "action_planning"

RECENT_CONTEXT_SIZE = 6

# ── Response sources ────────────────────────────────────────────────────────
SOURCE_RULE = "rule"
SOURCE_AI = "ai"

MAX_NEXT_QUESTIONS = 3


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """One recorded utterance in a coaching session."""
    speaker: str
    content: str
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_user(self) -> bool:
        return self.speaker == SPEAKER_USER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speaker": self.speaker,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class ConversationAnalysis:
    """Per-turn summary of a session's history."""
    message_count: int = 0
    user_message_count: int = 0
    topics: List[str] = field(default_factory=list)
    user_goals: List[str] = field(default_factory=list)
    challenges: List[str] = field(default_factory=list)
    emotions: List[EmotionResult] = field(default_factory=list)
    grow_phase_history: List[str] = field(default_factory=list)
    last_user_message: Optional[str] = None
    conversation_flow: str = FLOW_INITIAL
    recent_context: List[Message] = field(default_factory=list)

    @property
    def latest_emotion(self) -> Optional[EmotionResult]:
        return self.emotions[-1] if self.emotions else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message_count": self.message_count,
            "user_message_count": self.user_message_count,
            "topics": list(self.topics),
            "user_goals": list(self.user_goals),
            "challenges": list(self.challenges),
            "emotions": [e.to_dict() for e in self.emotions],
            "grow_phase_history": list(self.grow_phase_history),
            "last_user_message": self.last_user_message,
            "conversation_flow": self.conversation_flow,
            "recent_context": [m.to_dict() for m in self.recent_context],
        }


@dataclass(frozen=True)
class ResponsePayload:
    """
    One coaching turn's reply.

    Every field is always populated, whichever path built it; `source`
    records whether the rule-based pipeline or the AI service answered.
    """
    ai_response: str
    next_questions: Tuple[str, ...] = ()
    emotional_tone: str = "supportive"
    confidence: float = 0.8
    behavior_stage: str = STAGE_CONTEMPLATION
    grow_phase: str = PHASE_GOAL
    source: str = SOURCE_RULE

    def __post_init__(self):
        # frozen: go through object.__setattr__ to normalize
        object.__setattr__(
            self, "next_questions", tuple(self.next_questions)[:MAX_NEXT_QUESTIONS]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ai_response": self.ai_response,
            "next_questions": list(self.next_questions),
            "emotional_tone": self.emotional_tone,
            "confidence": self.confidence,
            "behavior_stage": self.behavior_stage,
            "grow_phase": self.grow_phase,
            "source": self.source,
        }
