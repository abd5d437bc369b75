"""
REST API routes for EVOLVE Coach.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import numpy as np
from fastapi import APIRouter, HTTPException

from ..content.goals import (
    POINTS_PER_COMPLETION,
    calculate_streak,
    convert_to_smart_goal,
    create_habit_plan,
    generate_micro_achievement,
    generate_motivational_message,
    plan_actions,
)
from ..content.progress import (
    NEXT_WEEK_FOCUS,
    WEEK_DAYS,
    analyze_behavior_change_stage,
    category_progress,
    emotional_trend,
    habit_formation_progress,
    improvement_suggestions,
    record_day,
    weekly_progress,
    weekly_stats,
)
from ..core.engine import CoachingEngine
from ..core.model import SPEAKER_AI, SPEAKER_USER, ResponsePayload
from ..llm.client import LLMAPIError, LLMClient
from ..llm.service import AIServiceError, CoachAIService
from ..viz.emotion_chart import create_emotion_radar, create_emotion_trend
from .goal_manager import GoalManager
from .schemas import (
    CoachingResponse,
    CompleteActionRequest,
    ContinueSessionRequest,
    CreateGoalRequest,
    DashboardSummary,
    EmotionAnalysisData,
    HistoryMessage,
    ProgressSummary,
    StartSessionRequest,
    UpdateGoalRequest,
    WeeklyReport,
    WeeklyStats,
)
from .session import DEMO_USER_ID, SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Process-wide stores and engine, created on first use
session_manager: Optional[SessionManager] = None
goal_manager: Optional[GoalManager] = None
engine: Optional[CoachingEngine] = None
rng: Optional[np.random.Generator] = None


def get_session_manager() -> SessionManager:
    global session_manager
    if session_manager is None:
        session_manager = SessionManager()
    return session_manager


def get_goal_manager() -> GoalManager:
    global goal_manager
    if goal_manager is None:
        goal_manager = GoalManager()
    return goal_manager


def build_engine() -> CoachingEngine:
    """Rule-based engine, plus the AI service when an API key is configured."""
    if os.environ.get("EVOLVE_USE_AI", "1").strip() == "0":
        logger.info("[Routes] AI service disabled by EVOLVE_USE_AI=0")
        return CoachingEngine()
    try:
        client = LLMClient()
    except LLMAPIError as e:
        logger.info(f"[Routes] AI service unavailable, rule-based replies only: {e}")
        return CoachingEngine()
    return CoachingEngine(ai_service=CoachAIService(client))


def get_engine() -> CoachingEngine:
    global engine
    if engine is None:
        engine = build_engine()
    return engine


def get_rng() -> np.random.Generator:
    global rng
    if rng is None:
        seed = os.environ.get("EVOLVE_RANDOM_SEED", "").strip()
        rng = np.random.default_rng(int(seed) if seed else None)
    return rng


def run_turn(session_id: str, text: str, first_turn: bool = False) -> CoachingResponse:
    """Record a user turn, answer it, and record the answer with its emotion."""
    sm = get_session_manager()
    coach = get_engine()

    if text:
        sm.add_message(session_id, SPEAKER_USER, text)

    history = None if first_turn else sm.get_history(session_id)
    goals = [_goal_summary(g) for g in get_goal_manager().list_goals()]
    payload: ResponsePayload = coach.respond(text, history, goals)

    ai_message_id = sm.add_message(session_id, SPEAKER_AI, payload.ai_response)
    emotion = coach.analyze(text)
    sm.attach_emotion(session_id, ai_message_id, emotion)

    return CoachingResponse(
        session_id=session_id,
        emotion_analysis=EmotionAnalysisData(**emotion.to_dict()),
        **payload.to_dict(),
    )


# =============================================================================
# STATUS
# =============================================================================

@router.get("/health")
async def health():
    return {"success": True, "message": "ok"}


@router.get("/status")
async def status():
    """Check system status including LLM availability."""
    return {"llm_available": get_engine().uses_ai}


# =============================================================================
# COACHING
# =============================================================================

@router.post("/coaching/session/start", response_model=CoachingResponse)
async def start_session(request: StartSessionRequest = StartSessionRequest()):
    """Start a new coaching session."""
    sm = get_session_manager()
    session_id = sm.create_session(context=request.session_context)
    return run_turn(session_id, request.text_input or "", first_turn=True)


@router.post("/coaching/session/{session_id}/continue", response_model=CoachingResponse)
async def continue_session(session_id: str, request: ContinueSessionRequest):
    """Continue an existing coaching session."""
    if not get_session_manager().session_exists(session_id):
        raise HTTPException(404, f"Session {session_id} not found")
    return run_turn(session_id, request.text_input)


@router.get("/coaching/session/{session_id}/history", response_model=List[HistoryMessage])
async def session_history(session_id: str):
    """Messages in order, with the emotion record attached where one exists."""
    sm = get_session_manager()
    if not sm.session_exists(session_id):
        raise HTTPException(404, f"Session {session_id} not found")

    messages = []
    for entry in sm.get_entries(session_id):
        emotion = entry["emotion"]
        messages.append(HistoryMessage(
            id=entry["id"],
            dominant_emotion=emotion.dominant if emotion else None,
            confidence_score=emotion.confidence if emotion else None,
            **entry["message"].to_dict(),
        ))
    return messages


@router.get("/coaching/session/{session_id}/emotion-chart")
async def emotion_chart(session_id: str):
    """Plotly JSON for the latest emotion radar and the session trend."""
    sm = get_session_manager()
    if not sm.session_exists(session_id):
        raise HTTPException(404, f"Session {session_id} not found")

    coach = get_engine()
    emotions = [coach.analyze(m.content) for m in sm.get_history(session_id) if m.is_user]
    latest = emotions[-1].scores if emotions else coach.analyze("").scores
    return {
        "radar": json.loads(create_emotion_radar(latest)),
        "trend": json.loads(create_emotion_trend(emotions)),
    }


# =============================================================================
# GOALS
# =============================================================================

def _goal_summary(goal: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": goal["id"],
        "raw_goal": goal["raw_goal"],
        "smart_goal": goal["smart_goal"],
        "category": goal["category"],
        "priority": goal["priority"],
        "status": goal["status"],
    }


def _goal_to_dict(goal: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(goal)
    data["target_date"] = goal["target_date"].isoformat() if goal["target_date"] else None
    data["created_at"] = goal["created_at"].isoformat()
    data["updated_at"] = goal["updated_at"].isoformat()
    data.update(get_goal_manager().goal_progress(goal["id"]))
    return data


def _record_to_dict(record: Dict[str, Any]) -> Dict[str, Any]:
    return {**record, "recorded_at": record["recorded_at"].isoformat()}


def _smart_goal_for(raw_goal: str) -> Dict[str, str]:
    coach = get_engine()
    if coach.ai_service is not None:
        try:
            return coach.ai_service.convert_to_smart_goal(raw_goal)
        except AIServiceError as e:
            logger.warning(f"[Routes] SMART conversion via AI failed, using rules: {e}")
    return convert_to_smart_goal(raw_goal)


@router.post("/goals/create")
async def create_goal(request: CreateGoalRequest):
    """Create a goal with its SMART form and a 21-day habit plan."""
    gm = get_goal_manager()
    smart_goal = _smart_goal_for(request.raw_goal)
    goal = gm.create_goal(
        raw_goal=request.raw_goal,
        smart_goal=smart_goal,
        category=request.category,
        priority=request.priority,
    )

    plan = create_habit_plan(goal["id"], smart_goal)
    gm.add_actions(plan_actions(plan, date.today()))

    return {
        "goal": _goal_to_dict(goal),
        "action_plan": [a.to_dict() for a in gm.actions_for_goal(goal["id"])],
        "habit_plan": {
            "goal_id": plan["goal_id"],
            "daily_reminders": plan["daily_reminders"],
            "success_metrics": plan["success_metrics"],
        },
    }


@router.get("/goals/list")
async def list_goals():
    return [_goal_to_dict(g) for g in get_goal_manager().list_goals()]


@router.get("/goals/actions/today")
async def today_actions():
    gm = get_goal_manager()
    result = []
    for action in gm.today_actions(date.today()):
        goal = gm.get_goal(action.goal_id)
        result.append({
            **action.to_dict(),
            "raw_goal": goal["raw_goal"],
            "category": goal["category"],
            "priority": goal["priority"],
        })
    return result


@router.post("/goals/actions/{action_id}/complete")
async def complete_action(action_id: str, request: CompleteActionRequest = CompleteActionRequest()):
    """Complete an action item and hand out a micro achievement."""
    gm = get_goal_manager()
    record = gm.complete_action(
        action_id,
        reflection=request.reflection,
        emotional_state=request.emotional_state,
    )
    if record is None:
        raise HTTPException(404, f"Action item {action_id} not found")

    action = gm.get_action(action_id)
    goal = gm.get_goal(action.goal_id)
    achievement = generate_micro_achievement(
        action, DEMO_USER_ID, goal["raw_goal"] if goal else "", get_rng()
    )
    return {
        "action": action.to_dict(),
        "progress_record": _record_to_dict(record),
        "achievement": achievement,
        "message": "アクションが完了しました！素晴らしい進歩です！",
    }


@router.get("/goals/{goal_id}")
async def goal_detail(goal_id: str):
    gm = get_goal_manager()
    goal = gm.get_goal(goal_id)
    if goal is None:
        raise HTTPException(404, f"Goal {goal_id} not found")
    return {
        "goal": _goal_to_dict(goal),
        "action_items": [a.to_dict() for a in gm.actions_for_goal(goal_id)],
        "progress_records": [_record_to_dict(r) for r in gm.progress_records(goal_id=goal_id)],
    }


@router.put("/goals/{goal_id}/update")
async def update_goal(goal_id: str, request: UpdateGoalRequest):
    target_date = date.fromisoformat(request.target_date) if request.target_date else None
    goal = get_goal_manager().update_goal(
        goal_id,
        raw_goal=request.raw_goal,
        smart_goal=request.smart_goal,
        priority=request.priority,
        status=request.status,
        target_date=target_date,
    )
    if goal is None:
        raise HTTPException(404, f"Goal {goal_id} not found")
    return _goal_to_dict(goal)


# =============================================================================
# DASHBOARD
# =============================================================================

RECENT_ACHIEVEMENTS = 5
DASHBOARD_GOALS = 5


def _recent_achievements(gm: GoalManager) -> List[Dict[str, Any]]:
    achievements = []
    for record in gm.progress_records()[:RECENT_ACHIEVEMENTS]:
        action = gm.get_action(record["action_item_id"])
        goal = gm.get_goal(record["goal_id"])
        achievements.append({
            "id": record["id"],
            "user_id": record["user_id"],
            "title": "目標達成！",
            "description": "素晴らしい進歩です！",
            "action_description": action.description if action else "",
            "raw_goal": goal["raw_goal"] if goal else "",
            "points": POINTS_PER_COMPLETION,
            "achieved_at": record["recorded_at"].isoformat(),
            "category": "daily",
        })
    return achievements


@router.get("/dashboard/summary", response_model=DashboardSummary)
async def dashboard_summary():
    gm = get_goal_manager()
    today = date.today()

    active = gm.list_goals(status="active")
    completed = gm.list_goals(status="completed")
    actions = gm.all_actions()
    done = sum(1 for a in actions if a.status == "completed")

    records = gm.progress_records()
    streak = calculate_streak((record_day(r) for r in records), today)
    points = len(records) * POINTS_PER_COMPLETION

    habit_progress = [
        habit_formation_progress(
            goal, gm.goal_progress(goal["id"])["completion_rate"], records, today
        )
        for goal in active
    ]

    return DashboardSummary(
        progress_summary=ProgressSummary(
            total_goals=len(active) + len(completed),
            completed_goals=len(completed),
            active_goals=len(active),
            completion_rate=(done / len(actions)) * 100 if actions else 0.0,
            current_streak=streak,
            total_points=points,
        ),
        today_actions=[a.to_dict() for a in gm.today_actions(today, limit=3)],
        active_goals=[_goal_to_dict(g) for g in active[:DASHBOARD_GOALS]],
        weekly_progress=weekly_progress(records, today),
        recent_achievements=_recent_achievements(gm),
        emotional_trend=emotional_trend(records, today),
        behavior_stage=analyze_behavior_change_stage(records, today),
        habit_progress=habit_progress,
        motivational_message=generate_motivational_message(streak, points, get_rng()),
    )


@router.get("/dashboard/weekly-report", response_model=WeeklyReport)
async def weekly_report():
    """Last seven days: totals, per-category progress and suggestions."""
    gm = get_goal_manager()
    today = date.today()
    records = gm.progress_records()

    categories = {
        goal_id: goal["category"]
        for goal_id, goal in ((r["goal_id"], gm.get_goal(r["goal_id"])) for r in records)
        if goal is not None
    }
    stats = weekly_stats(records, today)

    return WeeklyReport(
        period=f"{today - timedelta(days=WEEK_DAYS)} - {today}",
        stats=WeeklyStats(**stats),
        category_progress=category_progress(records, categories, today),
        improvements=improvement_suggestions(stats),
        next_week_focus=list(NEXT_WEEK_FOCUS),
    )
