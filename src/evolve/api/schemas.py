"""
Pydantic request/response models for the EVOLVE Coach API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# REQUEST MODELS
# =============================================================================

class StartSessionRequest(BaseModel):
    """Request to start a new coaching session."""
    text_input: str = Field("", description="Opening user message (may be empty)")
    session_context: Optional[Dict[str, Any]] = Field(None, description="Free-form client context")


class ContinueSessionRequest(BaseModel):
    """Request to continue an existing session."""
    text_input: str = Field(..., description="User's message for this turn")


class CreateGoalRequest(BaseModel):
    raw_goal: str = Field(..., min_length=1, description="Goal in the user's own words")
    priority: int = Field(3, ge=1, le=5)
    category: str = "general"


class UpdateGoalRequest(BaseModel):
    raw_goal: Optional[str] = None
    smart_goal: Optional[Dict[str, str]] = None
    priority: Optional[int] = Field(None, ge=1, le=5)
    status: Optional[str] = Field(None, pattern="^(active|completed|paused|cancelled)$")
    target_date: Optional[str] = Field(None, description="ISO date")


class CompleteActionRequest(BaseModel):
    reflection: Optional[str] = None
    emotional_state: Optional[int] = Field(None, ge=1, le=10)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class EmotionAnalysisData(BaseModel):
    """Lexicon emotion scores for one message."""
    emotion_scores: Dict[str, float]
    dominant_emotion: str
    confidence_score: float


class CoachingResponse(BaseModel):
    """One coaching turn."""
    session_id: str
    ai_response: str
    emotion_analysis: EmotionAnalysisData
    next_questions: List[str]
    emotional_tone: str
    confidence: float
    behavior_stage: str
    grow_phase: str
    source: str


class HistoryMessage(BaseModel):
    id: str
    speaker: str
    content: str
    created_at: str
    dominant_emotion: Optional[str] = None
    confidence_score: Optional[float] = None


class ProgressSummary(BaseModel):
    total_goals: int
    completed_goals: int
    active_goals: int
    completion_rate: float
    current_streak: int
    total_points: int


class DashboardSummary(BaseModel):
    progress_summary: ProgressSummary
    today_actions: List[Dict[str, Any]]
    active_goals: List[Dict[str, Any]]
    weekly_progress: List[Dict[str, Any]]
    recent_achievements: List[Dict[str, Any]]
    emotional_trend: List[Dict[str, Any]]
    behavior_stage: Dict[str, Any]
    habit_progress: List[Dict[str, Any]]
    motivational_message: str


class WeeklyStats(BaseModel):
    active_goals: int
    total_actions: int
    avg_emotional_state: float
    active_days: int


class WeeklyReport(BaseModel):
    period: str
    stats: WeeklyStats
    category_progress: List[Dict[str, Any]]
    improvements: List[str]
    next_week_focus: List[str]
