"""
Web interface for rock-paper-scissors tournaments.

Provides a FastAPI application with REST endpoints and WebSocket support
for replaying tournaments live.
"""
