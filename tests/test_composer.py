"""Tests for rule-based response composition."""

import pytest

from evolve.content.templates import (
    ADAPTIVE_BY_FLOW,
    ADAPTIVE_EMPATHETIC,
    ADAPTIVE_ENCOURAGING,
    GENERIC_QUESTIONS,
    OPENING_QUESTIONS,
    STAGE_RESPONSES,
    WELCOME_MESSAGE,
)
from evolve.core.analyzer import analyze_conversation
from evolve.core.composer import ResponseComposer
from evolve.core.model import ConversationAnalysis, SPEAKER_AI

from conftest import make_history


@pytest.fixture
def composer():
    return ResponseComposer()


class TestWelcome:
    def test_empty_history_gets_welcome(self, composer):
        payload = composer.compose("Goal", "contemplation", ConversationAnalysis())
        assert payload.ai_response == WELCOME_MESSAGE
        assert list(payload.next_questions) == OPENING_QUESTIONS
        assert payload.emotional_tone == "supportive"
        assert payload.confidence == pytest.approx(0.8)
        assert payload.source == "rule"

    def test_welcome_regardless_of_phase(self, composer):
        payload = composer.compose("Will", "action", ConversationAnalysis())
        assert payload.ai_response == WELCOME_MESSAGE


class TestContextReplies:
    def test_goal_phase_quotes_goal(self, composer):
        analysis = analyze_conversation(make_history("英語を話せるようになりたい"))
        payload = composer.compose("Goal", "contemplation", analysis, "英語を話せるようになりたい")
        assert "英語を話せるようになりたい" in payload.ai_response
        assert payload.confidence == pytest.approx(0.75)
        assert all("英語を話せるようになりたい" in q for q in payload.next_questions[:2])

    def test_goal_phase_names_topics(self, composer):
        analysis = analyze_conversation(make_history("仕事と健康のこと"))
        payload = composer.compose("Goal", "contemplation", analysis)
        assert "仕事・キャリア・健康" in payload.ai_response

    def test_reality_phase_quotes_challenge(self, composer):
        analysis = analyze_conversation(make_history("朝起きるのが難しい"))
        payload = composer.compose("Reality", "contemplation", analysis)
        assert "朝起きるのが難しい" in payload.ai_response

    def test_long_challenge_is_shortened(self, composer):
        text = "難しい" + "あ" * 60
        analysis = analyze_conversation(make_history(text))
        payload = composer.compose("Reality", "contemplation", analysis)
        assert text not in payload.ai_response
        assert "…" in payload.ai_response

    def test_will_phase_with_goal(self, composer):
        analysis = analyze_conversation(make_history("早起きしたい"))
        payload = composer.compose("Will", "preparation", analysis)
        assert "早起きしたい" in payload.ai_response
        assert payload.emotional_tone == "motivational"


class TestStageReplies:
    @pytest.mark.parametrize("phase", ["Goal", "Reality", "Options", "Will"])
    @pytest.mark.parametrize("stage", [
        "precontemplation", "contemplation", "preparation", "action", "maintenance",
    ])
    def test_stage_keyed_reply_without_context(self, composer, phase, stage):
        analysis = analyze_conversation(make_history("はい"))
        payload = composer.compose(phase, stage, analysis)
        assert payload.ai_response == STAGE_RESPONSES[phase][stage]
        assert payload.confidence == pytest.approx(0.6)
        assert list(payload.next_questions) == GENERIC_QUESTIONS[phase]
        assert payload.behavior_stage == stage
        assert payload.grow_phase == phase

    def test_unknown_stage_uses_contemplation(self, composer):
        assert composer.stage_response("Goal", "unknown") == STAGE_RESPONSES["Goal"]["contemplation"]


class TestAdaptive:
    def test_unknown_phase_sad_user(self, composer):
        analysis = analyze_conversation(make_history("悲しいし辛い"))
        payload = composer.compose("Unknown", "contemplation", analysis)
        assert payload.ai_response == ADAPTIVE_EMPATHETIC
        assert payload.emotional_tone == "empathetic"
        assert payload.confidence == pytest.approx(0.5)

    def test_unknown_phase_joyful_user(self, composer):
        analysis = analyze_conversation(make_history("嬉しいし楽しい"))
        payload = composer.compose("Unknown", "action", analysis)
        assert payload.ai_response == ADAPTIVE_ENCOURAGING
        assert payload.emotional_tone == "encouraging"

    def test_unknown_phase_neutral_user_uses_flow(self, composer):
        history = make_history("はい", (SPEAKER_AI, "なるほど"), "そうです", (SPEAKER_AI, "ええ"))
        analysis = analyze_conversation(history)
        payload = composer.compose("Unknown", "contemplation", analysis)
        assert payload.ai_response == ADAPTIVE_BY_FLOW["exploration"]


class TestQuestionsAndTone:
    def test_at_most_three_questions(self, composer):
        analysis = analyze_conversation(make_history("痩せたい"))
        for phase in ("Goal", "Reality", "Options", "Will", "Unknown"):
            assert len(composer.compose(phase, "action", analysis).next_questions) <= 3

    def test_goal_from_current_text_when_history_has_none(self, composer):
        analysis = analyze_conversation(make_history("はい"))
        questions = composer.questions_for("Goal", analysis, "ピアノを弾きたい")
        assert "ピアノを弾きたい" in questions[0]

    @pytest.mark.parametrize("text,phase,tone", [
        ("不安で心配", "Goal", "empathetic"),
        ("怒りでイライラ", "Will", "empathetic"),
        ("嬉しいし楽しい", "Will", "encouraging"),
        ("はい", "Will", "motivational"),
        ("はい", "Options", "supportive"),
    ])
    def test_tone(self, composer, text, phase, tone):
        analysis = analyze_conversation(make_history(text))
        assert composer.emotional_tone(phase, analysis) == tone


def test_same_inputs_same_payload(composer):
    history = make_history("仕事で困っている", (SPEAKER_AI, "詳しく"), "転職したい")
    first = composer.compose("Options", "preparation", analyze_conversation(history), "転職したい")
    second = composer.compose("Options", "preparation", analyze_conversation(history), "転職したい")
    assert first == second
