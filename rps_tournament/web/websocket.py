"""
WebSocket handlers for live tournament replay.
"""
import asyncio
import logging
from typing import Any, Dict, Set

from fastapi import WebSocket
from pydantic import ValidationError

from rps_tournament.utils.constants import ROUND_DELAY, MATCH_DELAY
from rps_tournament.web.models import WSStartReplay, WSSetSpeed, WSError
from rps_tournament.web.tournament_manager import TournamentManager, TournamentSession

logger = logging.getLogger(__name__)

# Pause after these event types, before the next event is sent
EVENT_DELAYS = {
    "round": ROUND_DELAY,
    "match_result": MATCH_DELAY,
}


class ConnectionManager:
    """Manages WebSocket connections for tournament sessions."""

    def __init__(self, tournament_manager: TournamentManager):
        self.tournament_manager = tournament_manager
        # Map tournament_id -> set of connected WebSockets
        self.connections: Dict[str, Set[WebSocket]] = {}
        # Map websocket -> tournament_id
        self.socket_tournaments: Dict[WebSocket, str] = {}

    async def connect(self, websocket: WebSocket, tournament_id: str):
        """Connect a WebSocket to a tournament."""
        await websocket.accept()

        if tournament_id not in self.connections:
            self.connections[tournament_id] = set()

        self.connections[tournament_id].add(websocket)
        self.socket_tournaments[websocket] = tournament_id

    def disconnect(self, websocket: WebSocket):
        """Disconnect a WebSocket."""
        tournament_id = self.socket_tournaments.get(websocket)
        if tournament_id and tournament_id in self.connections:
            self.connections[tournament_id].discard(websocket)
            if not self.connections[tournament_id]:
                del self.connections[tournament_id]
                self.tournament_manager.stop_replay(tournament_id)
        if websocket in self.socket_tournaments:
            del self.socket_tournaments[websocket]

    def has_listeners(self, tournament_id: str) -> bool:
        return bool(self.connections.get(tournament_id))

    async def broadcast(self, tournament_id: str, message: dict):
        """Broadcast a message to all connections for a tournament."""
        if tournament_id in self.connections:
            dead_sockets = set()
            for websocket in list(self.connections[tournament_id]):
                try:
                    await websocket.send_json(message)
                except Exception as e:
                    logger.debug("Dropping socket after send failure: %s", e)
                    dead_sockets.add(websocket)

            # Clean up dead connections
            for ws in dead_sockets:
                self.disconnect(ws)

    async def send_personal(self, websocket: WebSocket, message: dict):
        """Send a message to a specific WebSocket."""
        try:
            await websocket.send_json(message)
        except Exception as e:
            logger.debug("Dropping socket after send failure: %s", e)
            self.disconnect(websocket)


class TournamentWebSocketHandler:
    """Handles WebSocket messages for tournament sessions."""

    def __init__(self, connection_manager: ConnectionManager):
        self.manager = connection_manager
        self.tournament_manager = connection_manager.tournament_manager

    async def handle_message(self, websocket: WebSocket, tournament_id: str, data: Any):
        """
        Handle an incoming WebSocket message.

        Args:
            websocket: The WebSocket connection
            tournament_id: Tournament ID
            data: Parsed JSON message
        """
        if not isinstance(data, dict):
            await self.send_error(websocket, "Messages must be JSON objects")
            return

        msg_type = data.get("type")

        session = self.tournament_manager.get_session(tournament_id)
        if not session:
            await self.send_error(websocket, "Tournament not found")
            return

        handlers = {
            "get_state": self.handle_get_state,
            "start_replay": self.handle_start_replay,
            "set_speed": self.handle_set_speed,
            "pause": self.handle_pause,
            "resume": self.handle_resume,
            "ping": self.handle_ping,
        }

        handler = handlers.get(msg_type)
        if handler:
            try:
                await handler(websocket, session, data)
            except ValidationError as e:
                await self.send_error(websocket, f"Invalid {msg_type} message: {e.errors()[0]['msg']}")
        else:
            await self.send_error(websocket, f"Unknown message type: {msg_type}")

    async def handle_get_state(self, websocket: WebSocket, session: TournamentSession, data: dict):
        """Send the final result."""
        await self.manager.send_personal(websocket, {
            "type": "state",
            "state": session.result.to_dict()
        })

    async def handle_start_replay(self, websocket: WebSocket, session: TournamentSession, data: dict):
        """Start streaming the recorded events."""
        message = WSStartReplay(**data)
        if message.speed is not None:
            session.speed = message.speed

        if session.replay_task and not session.replay_task.done():
            await self.send_error(websocket, "Replay already running")
            return

        await self.manager.send_personal(websocket, {
            "type": "replay_started",
            "speed": session.speed
        })

        session.resume_event.set()
        session.replay_task = asyncio.create_task(self.run_replay(session))

    async def run_replay(self, session: TournamentSession):
        """Send each recorded event, pacing by the session speed."""
        for event in session.events:
            await session.resume_event.wait()
            if not self.manager.has_listeners(session.tournament_id):
                logger.info("No listeners left for %s, stopping replay", session.tournament_id)
                return
            await self.manager.broadcast(session.tournament_id, event)

            delay = EVENT_DELAYS.get(event["type"], 0.0)
            if delay:
                await asyncio.sleep(delay / session.speed)

        await self.manager.broadcast(session.tournament_id, {"type": "replay_complete"})

    async def handle_set_speed(self, websocket: WebSocket, session: TournamentSession, data: dict):
        """Change the replay speed."""
        message = WSSetSpeed(**data)
        session.speed = message.speed
        await self.manager.broadcast(session.tournament_id, {
            "type": "speed_changed",
            "speed": session.speed
        })

    async def handle_pause(self, websocket: WebSocket, session: TournamentSession, data: dict):
        """Pause the replay."""
        session.resume_event.clear()
        await self.manager.broadcast(session.tournament_id, {"type": "replay_paused"})

    async def handle_resume(self, websocket: WebSocket, session: TournamentSession, data: dict):
        """Resume a paused replay."""
        session.resume_event.set()
        await self.manager.broadcast(session.tournament_id, {"type": "replay_resumed"})

    async def handle_ping(self, websocket: WebSocket, session: TournamentSession, data: dict):
        """Respond to ping."""
        await self.manager.send_personal(websocket, {"type": "pong"})

    async def send_error(self, websocket: WebSocket, message: str):
        """Send an error message."""
        await self.manager.send_personal(websocket, WSError(message=message).model_dump())
