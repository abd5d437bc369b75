"""
Goal support content: SMART conversion, 21-day habit plans, micro
achievements and motivational messages.

Random choices take an injected numpy Generator so callers (and tests)
control the sequence with a seed.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

HABIT_PLAN_DAYS = 21

# =============================================================================
# SMART GOALS
# =============================================================================

SMART_RULES = [
    (
        ("健康", "運動"),
        {
            "specific": "毎日30分の運動と健康的な食事習慣",
            "measurable": "週5日以上の運動実施、体重・体脂肪率の記録",
            "achievable": "段階的に運動強度を上げ、無理のない範囲で継続",
            "relevant": "長期的な健康維持と生活の質向上",
            "timebound": "21日間で基本習慣を確立",
        },
    ),
    (
        ("学習", "勉強"),
        {
            "specific": "毎日1時間の集中学習時間を確保",
            "measurable": "学習時間の記録、理解度テストの実施",
            "achievable": "現在のスケジュールに合わせた現実的な学習計画",
            "relevant": "スキルアップとキャリア発展",
            "timebound": "21日間で学習習慣を定着",
        },
    ),
    (
        ("仕事", "キャリア"),
        {
            "specific": "業務効率化と新しいスキルの習得",
            "measurable": "タスク完了率、新スキルの習得進捗",
            "achievable": "現在の業務量を考慮した実現可能な目標設定",
            "relevant": "キャリアアップと職場での価値向上",
            "timebound": "21日間で新しい働き方を確立",
        },
    ),
]


def convert_to_smart_goal(raw_goal: str) -> Dict[str, str]:
    """Rule-based SMART breakdown; first matching keyword group wins."""
    for triggers, smart in SMART_RULES:
        if any(t in raw_goal for t in triggers):
            return dict(smart)
    return {
        "specific": f"{raw_goal}を具体的な行動に分解",
        "measurable": "日々の進捗を数値で測定",
        "achievable": "現実的で実行可能な計画",
        "relevant": "個人の価値観と長期目標に合致",
        "timebound": "21日間で習慣化を目指す",
    }


# =============================================================================
# 21-DAY HABIT PLAN
# =============================================================================

BASE_ACTIONS = [
    ("目標の確認と意識づけ", 5),
    ("小さな行動の実践", 15),
    ("進捗の記録", 5),
]

# (label, phase name, first sequence order, extra minutes, difficulty override)
WEEK_PHASES = [
    ("Week1", "意識的実行期", 1, 0, None),
    ("Week2", "抵抗期・継続強化", 8, 5, "medium"),
    ("Week3", "習慣化期", 15, 0, None),
]

DAILY_REMINDERS = [
    "今日の小さな一歩を踏み出しましょう",
    "継続は力なり。今日も頑張りましょう",
    "習慣化まであと少し。今日も続けましょう",
]

SUCCESS_METRICS = [
    "7日間連続実行",
    "14日間で80%以上の実行率",
    "21日間で習慣として定着",
]


@dataclass
class ActionItem:
    goal_id: str
    description: str
    sequence_order: int
    estimated_minutes: int
    difficulty_level: str = "easy"
    status: str = "pending"
    due_date: Optional[date] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "goal_id": self.goal_id,
            "description": self.description,
            "sequence_order": self.sequence_order,
            "estimated_minutes": self.estimated_minutes,
            "difficulty_level": self.difficulty_level,
            "status": self.status,
            "due_date": self.due_date.isoformat() if self.due_date else None,
        }


def create_habit_plan(goal_id: str, smart_goal: Dict[str, str]) -> Dict[str, Any]:
    """
    Three weeks of the same three base actions.

    Week 2 is the resistance phase: every action takes 5 minutes longer and
    is rated medium difficulty.
    """
    weeks: Dict[str, List[ActionItem]] = {}
    for label, phase_name, first_order, extra_minutes, difficulty in WEEK_PHASES:
        weeks[label] = [
            ActionItem(
                goal_id=goal_id,
                description=f"{label}: {description}（{phase_name}）",
                sequence_order=first_order + i,
                estimated_minutes=minutes + extra_minutes,
                difficulty_level=difficulty or "easy",
            )
            for i, (description, minutes) in enumerate(BASE_ACTIONS)
        ]
    return {
        "goal_id": goal_id,
        "focus": smart_goal.get("specific", ""),
        "week1_actions": weeks["Week1"],
        "week2_actions": weeks["Week2"],
        "week3_actions": weeks["Week3"],
        "daily_reminders": list(DAILY_REMINDERS),
        "success_metrics": list(SUCCESS_METRICS),
    }


def plan_actions(plan: Dict[str, Any], start: date) -> List[ActionItem]:
    """Flatten a habit plan and schedule a new action every 3 items, from tomorrow."""
    actions = plan["week1_actions"] + plan["week2_actions"] + plan["week3_actions"]
    for index, action in enumerate(actions):
        action.due_date = start + timedelta(days=index // 3 + 1)
    return actions


# =============================================================================
# ACHIEVEMENTS / MOTIVATION
# =============================================================================

ACHIEVEMENTS = [
    {"title": "第一歩達成！", "description": "最初のアクションを完了しました", "points": 10},
    {"title": "継続の力！", "description": "アクションを継続しています", "points": 15},
    {"title": "習慣の芽！", "description": "新しい習慣が育っています", "points": 20},
    {"title": "成長実感！", "description": "着実に成長を続けています", "points": 25},
]

POINTS_PER_COMPLETION = 10


def generate_micro_achievement(
    action: ActionItem,
    user_id: str,
    raw_goal: str,
    rng: np.random.Generator,
) -> Dict[str, Any]:
    picked = ACHIEVEMENTS[int(rng.integers(len(ACHIEVEMENTS)))]
    now = datetime.now(timezone.utc).isoformat()
    return {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "title": picked["title"],
        "description": picked["description"],
        "action_description": action.description or "アクション完了",
        "raw_goal": raw_goal or "目標達成",
        "points": picked["points"],
        "achieved_at": now,
        "category": "daily",
    }


def calculate_streak(completion_dates: Iterable[date], today: date) -> int:
    """Consecutive days with a completion, counting back from today."""
    days = set(completion_dates)
    streak = 0
    current = today
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def generate_motivational_message(
    streak: int,
    total_points: int,
    rng: np.random.Generator,
) -> str:
    if streak > 7:
        return f"🎉 {streak}日連続達成！習慣化への道のりを着実に歩んでいます！"
    if total_points > 100:
        return f"⭐ {total_points}ポイント達成！継続的な努力が素晴らしい結果を生んでいます！"
    messages = [
        f"{streak}日連続で頑張っています！この調子で続けましょう！",
        f"これまでに{total_points}ポイント獲得しました！素晴らしい成果です！",
        "小さな一歩の積み重ねが大きな変化を生み出します",
        "今日も新しい自分に向かって一歩前進しましょう",
        "継続は力なり。あなたの努力は必ず実を結びます",
    ]
    return messages[int(rng.integers(len(messages)))]
