"""
Lexicon-based emotion scoring.

Each user message gets a score for all seven emotion labels. Scores are
keyword intensities, not probabilities: they are not normalized and can
exceed 1.0 when several terms of the same list appear.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np

from .keywords import EMOTION_INCREMENT, EMOTION_KEYWORDS, EMOTION_LABELS, NEUTRAL_BASELINE


@dataclass(frozen=True)
class EmotionResult:
    """Scores for every label plus the dominant one."""
    scores: Dict[str, float] = field(default_factory=dict)
    dominant: str = "neutral"
    confidence: float = NEUTRAL_BASELINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emotion_scores": dict(self.scores),
            "dominant_emotion": self.dominant,
            "confidence_score": self.confidence,
        }


def score_emotions(text: str) -> Dict[str, float]:
    """Score text against the emotion lexicon. Always returns all 7 labels."""
    scores = {label: 0.0 for label in EMOTION_LABELS}
    scores["neutral"] = NEUTRAL_BASELINE
    for label, words in EMOTION_KEYWORDS.items():
        for word in words:
            if word in text:
                scores[label] += EMOTION_INCREMENT
    return scores


def dominant_emotion(scores: Dict[str, float]) -> str:
    """Argmax over the fixed label order; ties go to the earlier label."""
    values = np.array([scores.get(label, 0.0) for label in EMOTION_LABELS])
    return EMOTION_LABELS[int(np.argmax(values))]


def analyze_emotion(text: str) -> EmotionResult:
    """
    Score a single message.

    The confidence is the winning score itself, not a probability.
    """
    scores = score_emotions(text or "")
    return EmotionResult(
        scores=scores,
        dominant=dominant_emotion(scores),
        confidence=float(max(scores.values())),
    )
