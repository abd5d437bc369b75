"""
CoachAIService: LLM-backed coaching replies for EVOLVE Coach.

Three operations, each a single chat completion:
    generate_response: structured coaching reply
    classify_behavior_stage: one of the five behavior-change stages
    convert_to_smart_goal: SMART breakdown of a raw goal

Every failure surfaces as AIServiceError so the caller can fall back to the
rule-based pipeline.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..core.model import BEHAVIOR_STAGES, MAX_NEXT_QUESTIONS, SPEAKER_USER, Message
from .client import LLMAPIError, LLMClient

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 10

DEFAULT_TONE = "supportive"
DEFAULT_CONFIDENCE = 0.8

SMART_KEYS = ("specific", "measurable", "achievable", "relevant", "timebound")


class AIServiceError(Exception):
    """Raised when the AI service cannot produce a usable result."""


@dataclass
class CoachingContext:
    """What the AI service is told about the user for one turn."""
    session_history: List[Message] = field(default_factory=list)
    user_goals: List[Dict[str, Any]] = field(default_factory=list)
    behavior_stage: str = "contemplation"


@dataclass(frozen=True)
class AIResponse:
    content: str
    next_questions: List[str] = field(default_factory=list)
    emotional_tone: str = DEFAULT_TONE
    confidence: float = DEFAULT_CONFIDENCE


COACH_SYSTEM_PROMPT = """\
あなたは「EVOLVE」のAIコーチです。ユーザーの個人的な成長と目標達成をサポートする専門的なコーチとして振る舞ってください。

## あなたの役割
- 共感的で支援的なコーチング
- GROWモデル（Goal, Reality, Options, Will）に基づく質問
- 行動変容理論を活用した段階的サポート
- ユーザーの感情に寄り添った応答

## 現在のユーザー状況
- 行動変容ステージ: {behavior_stage}
- 設定済み目標数: {goal_count}
{goal_lines}
## 応答ガイドライン
1. 温かく共感的な口調を使用
2. 具体的で実行可能なアドバイスを提供
3. ユーザーの自主性を尊重
4. 小さな成功を認めて励ます
5. 必要に応じて適切な質問で深掘り

## 応答形式
応答は以下の形式で構造化してください：
CONTENT: [メインの応答内容]
QUESTIONS: [次の質問候補（3つまで、|で区切り）]
TONE: [emotional_tone: supportive/encouraging/empathetic/motivational]
CONFIDENCE: [0.0-1.0の信頼度]

日本語で応答してください。"""

STAGE_SYSTEM_PROMPT = """\
ユーザーの発言から行動変容ステージを判定してください。
以下のいずれかを返してください：
- precontemplation: 変化を考えていない
- contemplation: 変化を考えている
- preparation: 変化の準備をしている
- action: 行動を開始している
- maintenance: 行動を維持している

ステージ名のみを返してください。"""

SMART_SYSTEM_PROMPT = """\
以下の目標をSMART形式（Specific, Measurable, Achievable, Relevant, Time-bound）に変換してください。
JSON形式で返してください：
{
  "specific": "具体的な目標",
  "measurable": "測定可能な指標",
  "achievable": "達成可能性の評価",
  "relevant": "関連性と重要性",
  "timebound": "期限設定"
}"""

_CONTENT_RE = re.compile(r"CONTENT:\s*(.*?)(?=QUESTIONS:|TONE:|CONFIDENCE:|$)", re.S)
_QUESTIONS_RE = re.compile(r"QUESTIONS:\s*(.*?)(?=TONE:|CONFIDENCE:|$)", re.S)
_TONE_RE = re.compile(r"TONE:\s*(.*?)(?=CONFIDENCE:|$)", re.S)
_CONFIDENCE_RE = re.compile(r"CONFIDENCE:\s*([\d.]+)")


def build_system_prompt(context: CoachingContext) -> str:
    goal_lines = "".join(
        f"- 目標: {g.get('raw_goal', '')}\n" for g in context.user_goals[:5]
    )
    return COACH_SYSTEM_PROMPT.format(
        behavior_stage=context.behavior_stage,
        goal_count=len(context.user_goals),
        goal_lines=goal_lines,
    )


def build_conversation_history(history: Sequence[Message]) -> List[Dict[str, str]]:
    """Last 10 messages as chat turns."""
    return [
        {
            "role": "user" if m.speaker == SPEAKER_USER else "assistant",
            "content": m.content,
        }
        for m in list(history)[-HISTORY_WINDOW:]
    ]


def parse_ai_response(raw: str) -> AIResponse:
    """
    Parse a CONTENT / QUESTIONS / TONE / CONFIDENCE reply.

    Missing sections fall back to: whole text as content, no questions,
    tone "supportive", confidence 0.8. Confidence is clamped to [0, 1].
    """
    content_match = _CONTENT_RE.search(raw)
    questions_match = _QUESTIONS_RE.search(raw)
    tone_match = _TONE_RE.search(raw)
    confidence_match = _CONFIDENCE_RE.search(raw)

    content = (content_match.group(1).strip() if content_match else "") or raw.strip()
    questions_text = questions_match.group(1).strip() if questions_match else ""
    questions = [q.strip() for q in questions_text.split("|") if q.strip()]
    tone = (tone_match.group(1).strip() if tone_match else "") or DEFAULT_TONE

    confidence = DEFAULT_CONFIDENCE
    if confidence_match:
        try:
            confidence = float(confidence_match.group(1))
        except ValueError:
            confidence = DEFAULT_CONFIDENCE
    confidence = min(max(confidence, 0.0), 1.0)

    return AIResponse(
        content=content,
        next_questions=questions[:MAX_NEXT_QUESTIONS],
        emotional_tone=tone,
        confidence=confidence,
    )


class CoachAIService:
    """
    LLM coaching collaborator.

    Passed explicitly to the CoachingEngine; holds no process-wide state
    beyond its client.
    """

    def __init__(self, client: LLMClient):
        self.client = client

    def generate_response(self, user_text: str, context: CoachingContext) -> AIResponse:
        history = list(context.session_history)
        # the caller records the current turn before asking; send it once
        if history and history[-1].speaker == SPEAKER_USER and history[-1].content == user_text:
            history = history[:-1]

        messages = [{"role": "system", "content": build_system_prompt(context)}]
        messages.extend(build_conversation_history(history))
        messages.append({"role": "user", "content": user_text})

        logger.info(f"[CoachAIService] Sending {len(messages)} messages for coaching reply")
        raw = self._complete(messages, temperature=0.7, max_tokens=1000, top_p=0.9)
        if not raw.strip():
            raise AIServiceError("Empty coaching reply")
        return parse_ai_response(raw)

    def classify_behavior_stage(self, user_text: str, context: CoachingContext) -> str:
        raw = self._complete(
            [
                {"role": "system", "content": STAGE_SYSTEM_PROMPT},
                {"role": "user", "content": user_text},
            ],
            temperature=0.3,
            max_tokens=50,
        )
        stage = raw.strip().lower()
        if stage not in BEHAVIOR_STAGES:
            raise AIServiceError(f"Unrecognized behavior stage: {raw.strip()[:50]!r}")
        return stage

    def convert_to_smart_goal(self, raw_goal: str) -> Dict[str, str]:
        raw = self._complete(
            [
                {"role": "system", "content": SMART_SYSTEM_PROMPT},
                {"role": "user", "content": f"目標: {raw_goal}"},
            ],
            temperature=0.5,
            max_tokens=500,
            response_format={"type": "json_object"},
        )
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise AIServiceError(f"SMART goal reply is not JSON: {e}") from e
        if not isinstance(parsed, dict) or not all(parsed.get(k) for k in SMART_KEYS):
            raise AIServiceError("SMART goal reply is missing fields")
        return {k: str(parsed[k]) for k in SMART_KEYS}

    def _complete(self, messages: List[Dict[str, str]], **kwargs: Any) -> str:
        try:
            return self.client.chat_completion(messages=messages, **kwargs)
        except LLMAPIError as e:
            raise AIServiceError(str(e)) from e
