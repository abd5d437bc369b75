"""
Progress analytics for the dashboard: weekly series, emotional-state trend,
behavior-change stage from completion data, habit-formation progress and the
weekly report.

Every function works on plain progress records (dicts with `goal_id`,
`completed`, `emotional_state` and a timezone-aware `recorded_at`) and takes
`today` explicitly. Records are bucketed by local calendar day.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping

import numpy as np

from .goals import HABIT_PLAN_DAYS, calculate_streak

WEEK_DAYS = 7

# Emotional state is self-reported on a 1-10 scale
POSITIVE_STATE = 7
NEUTRAL_STATE = 5


def record_day(record: Mapping[str, Any]) -> date:
    return record["recorded_at"].astimezone().date()


def records_in_week(records: Iterable[Mapping[str, Any]], today: date) -> List[Mapping[str, Any]]:
    """Records dated on or after today minus 7 days."""
    start = today - timedelta(days=WEEK_DAYS)
    return [r for r in records if record_day(r) >= start]


def _mean_state(records: List[Mapping[str, Any]]) -> float:
    if not records:
        return 0.0
    return float(np.mean([r["emotional_state"] or 0 for r in records]))


def _by_day(records: Iterable[Mapping[str, Any]]) -> Dict[date, List[Mapping[str, Any]]]:
    days: Dict[date, List[Mapping[str, Any]]] = defaultdict(list)
    for record in records:
        days[record_day(record)].append(record)
    return days


# =============================================================================
# DASHBOARD SERIES
# =============================================================================

def weekly_progress(records: Iterable[Mapping[str, Any]], today: date) -> List[Dict[str, Any]]:
    """Completed actions and mean emotional state per active day this week."""
    completed = [r for r in records_in_week(records, today) if r["completed"]]
    return [
        {
            "date": day.isoformat(),
            "completed_actions": len(day_records),
            "avg_emotional_state": _mean_state(day_records),
        }
        for day, day_records in sorted(_by_day(completed).items())
    ]


def emotional_trend(records: Iterable[Mapping[str, Any]], today: date) -> List[Dict[str, Any]]:
    """Mean emotional state per day this week, labelled positive / neutral / negative."""
    trend = []
    for day, day_records in sorted(_by_day(records_in_week(records, today)).items()):
        average = _mean_state(day_records)
        if average > POSITIVE_STATE:
            label = "positive"
        elif average > NEUTRAL_STATE:
            label = "neutral"
        else:
            label = "negative"
        trend.append({
            "date": day.isoformat(),
            "dominant_emotion": label,
            "average_score": average,
            "record_count": len(day_records),
        })
    return trend


# =============================================================================
# BEHAVIOR-CHANGE STAGE FROM PROGRESS
# =============================================================================

NO_PROGRESS_STAGE = {
    "stage": "precontemplation",
    "stage_description": "まだ行動変容の準備段階です",
    "next_stage_tips": ["小さな目標から始めてみましょう", "変化の必要性を認識することから始めます"],
    "confidence_level": 3,
    "motivation_level": 3,
    "barriers": ["時間不足", "習慣化の難しさ"],
    "facilitators": ["小さな目標設定", "サポートシステム"],
}

STAGE_NOTES = {
    "contemplation": (
        "変化を考え始めている段階です",
        ["具体的な行動計画を立てましょう", "小さな成功体験を積み重ねましょう"],
    ),
    "preparation": (
        "行動の準備が整ってきています",
        ["環境を整えて行動しやすくしましょう", "支援システムを活用しましょう"],
    ),
    "action": (
        "積極的に行動を起こしている段階です",
        ["継続のための仕組みを作りましょう", "困難な時の対処法を準備しましょう"],
    ),
    "maintenance": (
        "新しい習慣が定着してきています",
        ["長期的な維持戦略を考えましょう", "新しい挑戦を追加してみましょう"],
    ),
}


def analyze_behavior_change_stage(
    records: Iterable[Mapping[str, Any]],
    today: date,
) -> Dict[str, Any]:
    """
    Behavior-change stage from the last week of progress records.

    Unlike the conversational classifier in core.stages, this reads what the
    user actually did:
        completion rate < 0.3                         -> contemplation
        completion rate < 0.6 or < 3 active days      -> preparation
        < 5 active days or mean emotional state < 6   -> action
        otherwise                                     -> maintenance
    No records this week gives precontemplation.
    """
    recent = records_in_week(records, today)
    if not recent:
        return {**NO_PROGRESS_STAGE, "current_stage": NO_PROGRESS_STAGE["stage"]}

    completion_rate = sum(1 for r in recent if r["completed"]) / len(recent)
    avg_state = _mean_state(recent)
    active_days = len({record_day(r) for r in recent})

    if completion_rate < 0.3:
        stage = "contemplation"
    elif completion_rate < 0.6 or active_days < 3:
        stage = "preparation"
    elif active_days < 5 or avg_state < 6:
        stage = "action"
    else:
        stage = "maintenance"

    description, tips = STAGE_NOTES[stage]
    return {
        "stage": stage,
        "current_stage": stage,
        "stage_description": description,
        "next_stage_tips": list(tips),
        "confidence_level": int(round(avg_state)),
        "motivation_level": int(round(completion_rate * 10)),
        "barriers": ["継続の困難", "時間管理"] if completion_rate < 0.5 else ["モチベーション維持"],
        "facilitators": ["習慣化システム", "サポートコミュニティ", "進捗の可視化"],
    }


# =============================================================================
# HABIT FORMATION
# =============================================================================

HABIT_PHASES = [
    # (days since first completion below, phase, description)
    (7, "initiation", "習慣形成の開始期（1-7日目）"),
    (14, "learning", "習慣学習期（8-14日目）"),
]
FINAL_HABIT_PHASE = ("stabilization", "習慣安定期（15-21日目）")


def habit_formation_progress(
    goal: Mapping[str, Any],
    completion_rate: float,
    records: Iterable[Mapping[str, Any]],
    today: date,
) -> Dict[str, Any]:
    """
    Where one goal stands in the 21-day habit cycle.

    Days count from the goal's first completed action. Habit strength grows
    by 100/21 per day plus half the completion rate, capped at 100.
    """
    days = [record_day(r) for r in records if r["goal_id"] == goal["id"] and r["completed"]]
    days_since_start = (today - min(days)).days if days else 0

    phase, description = FINAL_HABIT_PHASE
    for limit, name, text in HABIT_PHASES:
        if days_since_start < limit:
            phase, description = name, text
            break

    strength = days_since_start * 100 / HABIT_PLAN_DAYS + completion_rate * 0.5
    return {
        "goal_id": goal["id"],
        "habit_name": goal["raw_goal"],
        "current_streak": calculate_streak(days, today),
        "target_days": HABIT_PLAN_DAYS,
        "completion_rate": completion_rate,
        "days_since_start": days_since_start,
        "habit_strength": min(100.0, strength),
        "phase": phase,
        "phase_description": description,
    }


# =============================================================================
# WEEKLY REPORT
# =============================================================================

NEXT_WEEK_FOCUS = [
    "最も重要な目標に集中する",
    "新しい習慣を1つ追加する",
    "感情状態の記録を継続する",
    "週末に振り返りの時間を作る",
]


def weekly_stats(records: Iterable[Mapping[str, Any]], today: date) -> Dict[str, Any]:
    completed = [r for r in records_in_week(records, today) if r["completed"]]
    return {
        "active_goals": len({r["goal_id"] for r in completed}),
        "total_actions": len(completed),
        "avg_emotional_state": _mean_state(completed),
        "active_days": len({record_day(r) for r in completed}),
    }


def category_progress(
    records: Iterable[Mapping[str, Any]],
    categories: Mapping[str, str],
    today: date,
) -> List[Dict[str, Any]]:
    """Completed actions and mean satisfaction per goal category this week."""
    by_category: Dict[str, List[Mapping[str, Any]]] = defaultdict(list)
    for record in records_in_week(records, today):
        if record["completed"] and record["goal_id"] in categories:
            by_category[categories[record["goal_id"]]].append(record)
    return [
        {
            "category": category,
            "completed_actions": len(cat_records),
            "avg_satisfaction": _mean_state(cat_records),
        }
        for category, cat_records in sorted(by_category.items())
    ]


def improvement_suggestions(stats: Mapping[str, Any]) -> List[str]:
    suggestions = []
    if stats["active_days"] < 5:
        suggestions.append("週5日以上の活動を目指しましょう。小さな行動でも継続が重要です。")
    if stats["avg_emotional_state"] < 6:
        suggestions.append("感情状態の改善に注目しましょう。楽しめる活動を取り入れてみてください。")
    if stats["total_actions"] < 10:
        suggestions.append("より多くの小さなアクションを設定して、成功体験を増やしましょう。")
    if not suggestions:
        suggestions.append("素晴らしい進捗です！この調子で新しい挑戦を追加してみましょう。")
    return suggestions
