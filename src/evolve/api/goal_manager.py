"""
In-memory goal, action-item and progress store for EVOLVE Coach.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ..content.goals import HABIT_PLAN_DAYS, ActionItem
from ..core.model import utcnow
from .session import DEMO_USER_ID


class GoalManager:
    """Goals with their action items and progress records, kept in memory."""

    def __init__(self):
        self._goals: Dict[str, Dict[str, Any]] = {}
        self._actions: Dict[str, ActionItem] = {}
        self._progress: List[Dict[str, Any]] = []

    # ── Goals ───────────────────────────────────────────────────────────────

    def create_goal(
        self,
        raw_goal: str,
        smart_goal: Dict[str, str],
        category: str = "general",
        priority: int = 3,
        user_id: str = DEMO_USER_ID,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        today = today or date.today()
        now = utcnow()
        goal = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "raw_goal": raw_goal,
            "smart_goal": dict(smart_goal),
            "category": category,
            "priority": priority,
            "status": "active",
            "target_date": today + timedelta(days=HABIT_PLAN_DAYS),
            "created_at": now,
            "updated_at": now,
        }
        self._goals[goal["id"]] = goal
        return goal

    def get_goal(self, goal_id: str) -> Optional[Dict[str, Any]]:
        return self._goals.get(goal_id)

    def update_goal(self, goal_id: str, **changes: Any) -> Optional[Dict[str, Any]]:
        """Apply non-None changes; returns None for an unknown goal."""
        goal = self._goals.get(goal_id)
        if goal is None:
            return None
        for key, value in changes.items():
            if value is not None and key in goal:
                goal[key] = value
        goal["updated_at"] = utcnow()
        return goal

    def list_goals(self, user_id: str = DEMO_USER_ID, status: str = "active") -> List[Dict[str, Any]]:
        """Goals by priority (high first), newest first within a priority."""
        goals = [
            g for g in self._goals.values()
            if g["user_id"] == user_id and g["status"] == status
        ]
        goals.sort(key=lambda g: g["created_at"], reverse=True)
        goals.sort(key=lambda g: g["priority"], reverse=True)
        return goals

    def goal_progress(self, goal_id: str) -> Dict[str, Any]:
        actions = self.actions_for_goal(goal_id)
        completed = sum(1 for a in actions if a.status == "completed")
        return {
            "total_actions": len(actions),
            "completed_actions": completed,
            "completion_rate": (completed / len(actions)) * 100 if actions else 0.0,
        }

    # ── Actions ─────────────────────────────────────────────────────────────

    def add_actions(self, actions: List[ActionItem]) -> None:
        for action in actions:
            self._actions[action.id] = action

    def get_action(self, action_id: str) -> Optional[ActionItem]:
        return self._actions.get(action_id)

    def actions_for_goal(self, goal_id: str) -> List[ActionItem]:
        return sorted(
            (a for a in self._actions.values() if a.goal_id == goal_id),
            key=lambda a: a.sequence_order,
        )

    def today_actions(
        self,
        today: date,
        user_id: str = DEMO_USER_ID,
        limit: int = 5,
    ) -> List[ActionItem]:
        """Open actions due today or earlier, highest goal priority first."""
        candidates = []
        for action in self._actions.values():
            goal = self._goals.get(action.goal_id)
            if goal is None or goal["user_id"] != user_id:
                continue
            if action.status not in ("pending", "in_progress"):
                continue
            if action.due_date is None or action.due_date > today:
                continue
            candidates.append((-goal["priority"], action.sequence_order, action))
        candidates.sort(key=lambda c: (c[0], c[1]))
        return [c[2] for c in candidates[:limit]]

    def complete_action(
        self,
        action_id: str,
        reflection: Optional[str] = None,
        emotional_state: Optional[int] = None,
        user_id: str = DEMO_USER_ID,
    ) -> Optional[Dict[str, Any]]:
        """Mark an action completed and record progress; None if unknown."""
        action = self._actions.get(action_id)
        if action is None:
            return None
        action.status = "completed"
        record = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "goal_id": action.goal_id,
            "action_item_id": action_id,
            "completed": True,
            "reflection": reflection or "",
            "emotional_state": emotional_state or 7,
            "recorded_at": utcnow(),
        }
        self._progress.append(record)
        return record

    def progress_records(
        self,
        user_id: str = DEMO_USER_ID,
        goal_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Progress records, newest first."""
        records = [
            r for r in self._progress
            if r["user_id"] == user_id and (goal_id is None or r["goal_id"] == goal_id)
        ]
        return sorted(records, key=lambda r: r["recorded_at"], reverse=True)

    def all_actions(self, user_id: str = DEMO_USER_ID) -> List[ActionItem]:
        return [
            a for a in self._actions.values()
            if a.goal_id in self._goals and self._goals[a.goal_id]["user_id"] == user_id
        ]
