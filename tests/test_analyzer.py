"""Tests for conversation history analysis."""

import pytest

from evolve.core.analyzer import analyze_conversation, conversation_flow, detect_grow_phases
from evolve.core.model import SPEAKER_AI

from conftest import alternating, make_history


class TestConversationFlow:
    @pytest.mark.parametrize("count,expected", [
        (0, "initial"),
        (2, "initial"),
        (3, "exploration"),
        (6, "exploration"),
        (7, "deepening"),
        (12, "deepening"),
        (13, "action_planning"),
        (40, "action_planning"),
    ])
    def test_breakpoints(self, count, expected):
        assert conversation_flow(count) == expected

    def test_thirteen_message_history_is_action_planning(self):
        analysis = analyze_conversation(alternating(13))
        assert analysis.message_count == 13
        assert analysis.conversation_flow == "action_planning"


class TestEmptyHistory:
    @pytest.mark.parametrize("history", [None, []])
    def test_initial_analysis(self, history):
        analysis = analyze_conversation(history)
        assert analysis.message_count == 0
        assert analysis.user_message_count == 0
        assert analysis.topics == []
        assert analysis.user_goals == []
        assert analysis.challenges == []
        assert analysis.emotions == []
        assert analysis.grow_phase_history == []
        assert analysis.last_user_message is None
        assert analysis.conversation_flow == "initial"
        assert analysis.latest_emotion is None


class TestAnalysis:
    def test_counts_and_last_user_message(self):
        history = make_history(
            "仕事で困っている",
            (SPEAKER_AI, "詳しく教えてください"),
            "転職したい",
        )
        analysis = analyze_conversation(history)
        assert analysis.message_count == 3
        assert analysis.user_message_count == 2
        assert analysis.last_user_message == "転職したい"
        assert analysis.topics == ["career"]
        assert analysis.user_goals == ["転職したい"]
        assert analysis.challenges == ["仕事で困っている"]

    def test_one_emotion_per_user_message(self):
        history = make_history(
            "不安で心配です",
            (SPEAKER_AI, "嬉しい楽しい幸せ"),
            "嬉しいし楽しい",
        )
        analysis = analyze_conversation(history)
        assert len(analysis.emotions) == 2
        assert analysis.emotions[0].dominant == "fear"
        assert analysis.latest_emotion.dominant == "joy"

    def test_grow_history_ignores_ai_messages(self):
        history = make_history(
            (SPEAKER_AI, "あなたの目標は何ですか？どんな方法がありますか？"),
            "まだよくわからない",
        )
        assert analyze_conversation(history).grow_phase_history == []

    def test_grow_history_in_message_order(self):
        history = make_history(
            "目標を決めたい",
            (SPEAKER_AI, "いいですね"),
            "明日から始める",
        )
        assert analyze_conversation(history).grow_phase_history == ["Goal", "Will"]

    def test_recent_context_is_last_six(self):
        history = alternating(9)
        analysis = analyze_conversation(history)
        assert analysis.recent_context == history[-6:]

    def test_goals_only_from_user_messages(self):
        history = make_history((SPEAKER_AI, "何をしたいですか？"), "特にない")
        assert analyze_conversation(history).user_goals == []

    def test_repeatable(self):
        history = make_history("英語を勉強したい", (SPEAKER_AI, "いいですね"), "毎日続けている")
        first = analyze_conversation(history).to_dict()
        second = analyze_conversation(history).to_dict()
        assert first == second


class TestDetectGrowPhases:
    def test_multiple_phases_in_phase_order(self):
        assert detect_grow_phases("実行する方法を知りたい") == ["Options", "Will"]

    def test_no_phase(self):
        assert detect_grow_phases("こんにちは") == []
