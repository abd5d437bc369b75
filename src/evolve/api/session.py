"""
In-memory session manager for EVOLVE Coach.

Stores each coaching session's message history, keyed by session_id.
Messages are append-only; an emotion record can be attached to a message
after the fact.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from ..core.emotion import EmotionResult
from ..core.model import Message, utcnow

DEMO_USER_ID = "demo-user-001"


class SessionManager:
    """
    Manages active coaching sessions in memory.

    Each session keeps its owner, context and an ordered list of entries
    {"id", "message", "emotion"}.
    """

    def __init__(self):
        self._sessions: Dict[str, Dict[str, Any]] = {}

    def create_session(
        self,
        user_id: str = DEMO_USER_ID,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Create a new session and return its ID."""
        session_id = str(uuid.uuid4())[:8]
        self._sessions[session_id] = {
            "user_id": user_id,
            "session_type": "ai_coaching",
            "context": dict(context or {}),
            "status": "active",
            "started_at": utcnow(),
            "entries": [],
        }
        return session_id

    def session_exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def add_message(self, session_id: str, speaker: str, content: str) -> Optional[str]:
        """Append a message and return its ID (None for an unknown session)."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        message_id = str(uuid.uuid4())
        session["entries"].append({
            "id": message_id,
            "message": Message(speaker=speaker, content=content),
            "emotion": None,
        })
        return message_id

    def attach_emotion(self, session_id: str, message_id: str, emotion: EmotionResult) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False
        for entry in session["entries"]:
            if entry["id"] == message_id:
                entry["emotion"] = emotion
                return True
        return False

    def get_history(self, session_id: str) -> List[Message]:
        """Messages of a session in creation order."""
        session = self._sessions.get(session_id)
        return [e["message"] for e in session["entries"]] if session else []

    def get_entries(self, session_id: str) -> List[Dict[str, Any]]:
        session = self._sessions.get(session_id)
        return list(session["entries"]) if session else []
