"""
End-to-end tests for the REST and WebSocket API.

Runs with a rule-based engine and fresh in-memory stores per test.
"""

from unittest.mock import MagicMock

import numpy as np
import pytest
from fastapi.testclient import TestClient

from evolve.api import routes
from evolve.api.app import app
from evolve.api.goal_manager import GoalManager
from evolve.api.session import SessionManager
from evolve.content.templates import WELCOME_MESSAGE
from evolve.core.engine import CoachingEngine
from evolve.llm.service import AIServiceError, CoachAIService


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(routes, "session_manager", SessionManager())
    monkeypatch.setattr(routes, "goal_manager", GoalManager())
    monkeypatch.setattr(routes, "engine", CoachingEngine())
    monkeypatch.setattr(routes, "rng", np.random.default_rng(0))
    return TestClient(app)


def start(client, text=""):
    resp = client.post("/api/coaching/session/start", json={"text_input": text})
    assert resp.status_code == 200
    return resp.json()


class TestStatus:
    def test_health(self, client):
        assert client.get("/api/health").json() == {"success": True, "message": "ok"}

    def test_status_rule_based(self, client):
        assert client.get("/api/status").json() == {"llm_available": False}

    def test_build_engine_respects_flag(self, monkeypatch):
        monkeypatch.setenv("EVOLVE_USE_AI", "0")
        assert routes.build_engine().uses_ai is False


class TestCoaching:
    def test_start_gives_welcome(self, client):
        data = start(client)
        assert data["ai_response"] == WELCOME_MESSAGE
        assert data["emotional_tone"] == "supportive"
        assert data["confidence"] == pytest.approx(0.8)
        assert len(data["next_questions"]) == 3
        assert data["emotion_analysis"]["dominant_emotion"] == "neutral"
        assert data["source"] == "rule"

    def test_start_with_text_still_welcomes(self, client):
        data = start(client, "不安で心配です")
        assert data["ai_response"] == WELCOME_MESSAGE
        assert data["emotion_analysis"]["dominant_emotion"] == "fear"

    def test_continue_and_history(self, client):
        session_id = start(client)["session_id"]

        resp = client.post(
            f"/api/coaching/session/{session_id}/continue",
            json={"text_input": "ジョギングを始めた"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] == session_id
        assert data["behavior_stage"] == "action"
        assert 1 <= len(data["next_questions"]) <= 3

        history = client.get(f"/api/coaching/session/{session_id}/history").json()
        assert [m["speaker"] for m in history] == ["ai", "user", "ai"]
        assert history[0]["content"] == WELCOME_MESSAGE
        assert history[1]["content"] == "ジョギングを始めた"
        assert history[1]["dominant_emotion"] is None
        assert history[2]["dominant_emotion"] == "neutral"

    def test_continue_unknown_session(self, client):
        resp = client.post("/api/coaching/session/nope/continue", json={"text_input": "こんにちは"})
        assert resp.status_code == 404

    def test_history_unknown_session(self, client):
        assert client.get("/api/coaching/session/nope/history").status_code == 404

    def test_emotion_chart(self, client):
        session_id = start(client)["session_id"]
        client.post(
            f"/api/coaching/session/{session_id}/continue",
            json={"text_input": "嬉しいし楽しい"},
        )
        data = client.get(f"/api/coaching/session/{session_id}/emotion-chart").json()
        assert "data" in data["radar"]
        assert "data" in data["trend"]

    def test_ai_failure_falls_back(self, client, monkeypatch):
        service = MagicMock(spec=CoachAIService)
        service.classify_behavior_stage.side_effect = AIServiceError("down")
        monkeypatch.setattr(routes, "engine", CoachingEngine(ai_service=service))

        session_id = start(client)["session_id"]
        resp = client.post(
            f"/api/coaching/session/{session_id}/continue",
            json={"text_input": "計画を立てたい"},
        )
        assert resp.status_code == 200
        assert resp.json()["source"] == "rule"
        assert resp.json()["behavior_stage"] == "preparation"


class TestGoals:
    def create(self, client, raw_goal="毎日運動して健康になりたい", priority=3):
        resp = client.post("/api/goals/create", json={"raw_goal": raw_goal, "priority": priority})
        assert resp.status_code == 200
        return resp.json()

    def test_create(self, client):
        data = self.create(client)
        assert data["goal"]["smart_goal"]["specific"] == "毎日30分の運動と健康的な食事習慣"
        assert data["goal"]["total_actions"] == 9
        assert len(data["action_plan"]) == 9
        assert len(data["habit_plan"]["daily_reminders"]) == 3

    def test_create_rejects_empty_goal(self, client):
        assert client.post("/api/goals/create", json={"raw_goal": ""}).status_code == 422

    def test_list_and_detail(self, client):
        low = self.create(client, "読書したい", priority=1)["goal"]
        high = self.create(client, "勉強したい", priority=5)["goal"]

        listed = client.get("/api/goals/list").json()
        assert [g["id"] for g in listed] == [high["id"], low["id"]]

        detail = client.get(f"/api/goals/{low['id']}").json()
        assert detail["goal"]["raw_goal"] == "読書したい"
        assert len(detail["action_items"]) == 9
        assert detail["progress_records"] == []

    def test_unknown_goal(self, client):
        assert client.get("/api/goals/nope").status_code == 404
        assert client.put("/api/goals/nope/update", json={"priority": 2}).status_code == 404

    def test_update(self, client):
        goal = self.create(client)["goal"]
        resp = client.put(f"/api/goals/{goal['id']}/update", json={"status": "paused"})
        assert resp.json()["status"] == "paused"
        assert client.put(
            f"/api/goals/{goal['id']}/update", json={"status": "finished"}
        ).status_code == 422

    def test_complete_action(self, client):
        action = self.create(client)["action_plan"][0]
        resp = client.post(
            f"/api/goals/actions/{action['id']}/complete",
            json={"reflection": "気持ちよかった", "emotional_state": 8},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["action"]["status"] == "completed"
        assert data["progress_record"]["emotional_state"] == 8
        assert data["achievement"]["user_id"] == "demo-user-001"

    def test_complete_unknown_action(self, client):
        assert client.post("/api/goals/actions/nope/complete", json={}).status_code == 404

    def test_nothing_due_on_creation_day(self, client):
        self.create(client)
        assert client.get("/api/goals/actions/today").json() == []


class TestDashboard:
    def test_empty(self, client):
        summary = client.get("/api/dashboard/summary").json()
        progress = summary["progress_summary"]
        assert progress["total_goals"] == 0
        assert progress["completion_rate"] == 0.0
        assert progress["current_streak"] == 0
        assert summary["today_actions"] == []
        assert summary["motivational_message"]

    def test_after_completion(self, client):
        created = client.post("/api/goals/create", json={"raw_goal": "早起きしたい"}).json()
        action_id = created["action_plan"][0]["id"]
        client.post(f"/api/goals/actions/{action_id}/complete", json={})

        progress = client.get("/api/dashboard/summary").json()["progress_summary"]
        assert progress["active_goals"] == 1
        assert progress["total_points"] == 10
        assert progress["current_streak"] == 1
        assert progress["completion_rate"] == pytest.approx(100 / 9)

    def test_analytics_sections(self, client):
        created = client.post("/api/goals/create", json={"raw_goal": "早起きしたい"}).json()
        action_id = created["action_plan"][0]["id"]
        client.post(f"/api/goals/actions/{action_id}/complete", json={"emotional_state": 8})

        summary = client.get("/api/dashboard/summary").json()
        assert summary["active_goals"][0]["raw_goal"] == "早起きしたい"
        assert summary["weekly_progress"][0]["completed_actions"] == 1
        assert summary["weekly_progress"][0]["avg_emotional_state"] == pytest.approx(8.0)
        assert summary["recent_achievements"][0]["raw_goal"] == "早起きしたい"
        assert summary["emotional_trend"][0]["dominant_emotion"] == "positive"
        assert summary["behavior_stage"]["stage"] == "preparation"
        habit = summary["habit_progress"][0]
        assert habit["phase"] == "initiation"
        assert habit["current_streak"] == 1

    def test_empty_analytics(self, client):
        summary = client.get("/api/dashboard/summary").json()
        assert summary["behavior_stage"]["stage"] == "precontemplation"
        assert summary["weekly_progress"] == []
        assert summary["habit_progress"] == []

    def test_weekly_report(self, client):
        created = client.post(
            "/api/goals/create", json={"raw_goal": "英語の勉強", "category": "learning"}
        ).json()
        client.post(f"/api/goals/actions/{created['action_plan'][0]['id']}/complete", json={})

        report = client.get("/api/dashboard/weekly-report").json()
        assert report["stats"]["total_actions"] == 1
        assert report["stats"]["active_days"] == 1
        assert report["category_progress"] == [
            {"category": "learning", "completed_actions": 1, "avg_satisfaction": 7.0}
        ]
        assert len(report["improvements"]) == 2
        assert len(report["next_week_focus"]) == 4
        assert " - " in report["period"]


class TestWebSocket:
    def test_coaching_request(self, client):
        session_id = start(client)["session_id"]
        with client.websocket_connect(f"/ws/{session_id}") as ws:
            ws.send_json({"type": "ai_coaching_request", "content": "不安で心配です"})
            reply = ws.receive_json()
            emotion = ws.receive_json()

        assert reply["type"] == "ai_response"
        assert reply["data"]["session_id"] == session_id
        assert "emotion_analysis" not in reply["data"]
        assert emotion["type"] == "emotion_update"
        assert emotion["data"]["dominant_emotion"] == "fear"

    def test_empty_and_unknown_messages(self, client):
        session_id = start(client)["session_id"]
        with client.websocket_connect(f"/ws/{session_id}") as ws:
            ws.send_json({"type": "ai_coaching_request", "content": "  "})
            assert ws.receive_json() == {"type": "error", "message": "Empty message"}
            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "error"

    def test_unknown_session(self, client):
        with client.websocket_connect("/ws/nope") as ws:
            assert ws.receive_json()["type"] == "error"

    def test_bad_frames_keep_socket_open(self, client):
        session_id = start(client)["session_id"]
        with client.websocket_connect(f"/ws/{session_id}") as ws:
            ws.send_text("{not json")
            assert ws.receive_json() == {"type": "error", "message": "Invalid JSON"}
            ws.send_json(["ai_coaching_request"])
            assert ws.receive_json() == {"type": "error", "message": "Expected a JSON object"}
            ws.send_json(42)
            assert ws.receive_json()["type"] == "error"

            ws.send_json({"type": "ai_coaching_request", "content": "はい"})
            assert ws.receive_json()["type"] == "ai_response"
            assert ws.receive_json()["type"] == "emotion_update"
