"""
Quick demo script: run EVOLVE Coach locally.

Usage:
    python scripts/run_demo.py
"""

import os

import uvicorn


def main():
    port = int(os.environ.get("PORT", "3003"))
    print("=" * 60)
    print("  EVOLVE Coach — GROW-model coaching API")
    print("=" * 60)
    print()
    print(f"Starting server at http://localhost:{port}")
    print(f"Coaching API: http://localhost:{port}/api")
    print(f"WebSocket:    ws://localhost:{port}/ws/<session_id>")
    print()
    print(f"API docs: http://localhost:{port}/docs")
    print("Press Ctrl+C to stop.")
    print()

    uvicorn.run(
        "evolve.api.app:app",
        host="0.0.0.0",
        port=port,
        reload=True,
    )


if __name__ == "__main__":
    main()
