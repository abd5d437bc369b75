"""
FastAPI application for EVOLVE Coach.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, WebSocket

# Configure logging to show INFO from evolve modules
logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")
logging.getLogger("evolve").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware

from .routes import router, get_session_manager
from .websocket import websocket_endpoint

app = FastAPI(
    title="EVOLVE Coach",
    description="GROW-model coaching with behavior-change stage awareness",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.environ.get("CLIENT_URL", "http://localhost:5173")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    return {"message": "EVOLVE Coach API", "docs": "/docs"}


@app.websocket("/ws/{session_id}")
async def ws_endpoint(websocket: WebSocket, session_id: str):
    """WebSocket endpoint for real-time coaching."""
    sm = get_session_manager()
    await websocket_endpoint(websocket, session_id, sm)
