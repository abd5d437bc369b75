"""Tests for topic, goal and challenge extraction."""

import pytest

from evolve.core.extractor import (
    extract,
    extract_challenges,
    extract_goals,
    extract_topics,
    goals_in_text,
)


class TestTopics:
    def test_topics_found_once_each(self):
        topics = extract_topics([
            "仕事が忙しい",
            "転職も考えている",
            "運動不足が気になる",
        ])
        assert topics == ["career", "health"]

    def test_no_topics(self):
        assert extract_topics(["こんにちは"]) == []

    def test_topics_follow_table_order(self):
        topics = extract_topics(["英語の勉強をしたい", "家族との時間"])
        assert topics == ["relationships", "learning"]


class TestGoals:
    def test_desire_phrase_is_captured_whole(self):
        assert goals_in_text("健康的な生活習慣を身につけたい") == ["健康的な生活習慣を身につけたい"]

    def test_explicit_goal_statement_strips_copula(self):
        assert goals_in_text("目標はフルマラソン完走です") == ["フルマラソン完走"]

    def test_explicit_statement_is_not_recaptured_by_desire_pattern(self):
        assert goals_in_text("目標は毎日走りたいです") == ["毎日走りたい"]

    def test_achievement_phrase(self):
        assert goals_in_text("達成したいのは資格取得") == ["資格取得"]

    def test_become_phrase(self):
        assert goals_in_text("英語を話せるようになりたい") == ["英語を話せるようになりたい"]

    def test_multiple_goals_in_one_message_keep_order(self):
        assert goals_in_text("早起きしたい。本を読みたい。") == ["早起きしたい", "本を読みたい"]

    def test_negative_desire_is_not_a_goal(self):
        assert goals_in_text("何もしたくない") == []

    def test_goals_capped_at_five_in_first_seen_order(self):
        texts = [f"目標{i}を達成したい" for i in range(1, 8)]
        goals = extract_goals(texts)
        assert len(goals) == 5
        assert goals == [f"目標{i}を達成したい" for i in range(1, 6)]

    def test_repeated_goal_counts_toward_cap(self):
        goals = extract_goals(["痩せたい"] * 7)
        assert goals == ["痩せたい"] * 5

    def test_matches_across_messages_keep_message_order(self):
        assert extract_goals(["痩せたい", "やっぱり痩せたい"]) == ["痩せたい", "やっぱり痩せたい"]

    @pytest.mark.parametrize("text", [
        "今日は水が冷たい",
        "荷物が重たい",
        "本当にありがたい",
        "めでたい話ですね",
    ])
    def test_adjectives_ending_in_tai_are_not_goals(self, text):
        assert goals_in_text(text) == []

    def test_kanji_stem_desire(self):
        assert goals_in_text("映画を見たい") == ["映画を見たい"]


class TestChallenges:
    def test_whole_message_is_recorded(self):
        text = "朝起きるのが難しいです"
        assert extract_challenges([text]) == [text]

    def test_capped_at_three(self):
        texts = [
            "仕事で困っている",
            "人間関係に悩んでいる",
            "時間がないのが問題",
            "どうしてもうまくいかない",
        ]
        assert extract_challenges(texts) == texts[:3]

    def test_messages_without_keywords_skipped(self):
        assert extract_challenges(["順調です", "課題が多い"]) == ["課題が多い"]


class TestExtract:
    def test_combined(self):
        result = extract(["仕事で困っている", "昇進したい"])
        assert result.topics == ["career"]
        assert result.goals == ["昇進したい"]
        assert result.challenges == ["仕事で困っている"]
