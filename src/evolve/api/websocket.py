"""
WebSocket handler for real-time EVOLVE coaching.
"""

from __future__ import annotations

import json

from fastapi import WebSocket, WebSocketDisconnect

from .routes import run_turn
from .session import SessionManager


async def websocket_endpoint(
    websocket: WebSocket,
    session_id: str,
    session_manager: SessionManager,
):
    """
    WebSocket handler for a coaching session.

    Protocol:
        Client -> Server:
            {"type": "ai_coaching_request", "content": "..."}

        Server -> Client:
            {"type": "ai_response", "data": {...}}
            {"type": "emotion_update", "data": {...}}
            {"type": "error", "message": "..."}
    """
    await websocket.accept()

    if not session_manager.session_exists(session_id):
        await websocket.send_json({"type": "error", "message": f"Session {session_id} not found"})
        await websocket.close()
        return

    try:
        while True:
            try:
                data = json.loads(await websocket.receive_text())
            except ValueError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue
            if not isinstance(data, dict):
                await websocket.send_json({"type": "error", "message": "Expected a JSON object"})
                continue

            msg_type = data.get("type", "")

            if msg_type == "ai_coaching_request":
                content = str(data.get("content", "")).strip()
                if not content:
                    await websocket.send_json({"type": "error", "message": "Empty message"})
                    continue

                result = run_turn(session_id, content)
                emotion = result.emotion_analysis.model_dump()
                reply = result.model_dump(exclude={"emotion_analysis"})

                await websocket.send_json({"type": "ai_response", "data": reply})
                await websocket.send_json({"type": "emotion_update", "data": emotion})

            else:
                await websocket.send_json({
                    "type": "error",
                    "message": f"Unsupported message type: {msg_type or '<missing>'}",
                })

    except WebSocketDisconnect:
        pass
